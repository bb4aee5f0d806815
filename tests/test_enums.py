import pytest

from journeydesk.models.enums import (
    DocumentStatus,
    ProgressStatus,
    StatusOutcome,
    SubmissionStatus,
    TradeStatus,
    status_outcome,
)


@pytest.mark.parametrize("status, outcome", [
    (DocumentStatus.APPROVED, StatusOutcome.POSITIVE),
    (SubmissionStatus.VERIFIED, StatusOutcome.POSITIVE),
    (ProgressStatus.COMPLETED, StatusOutcome.POSITIVE),
    (TradeStatus.REJECTED, StatusOutcome.NEGATIVE),
    ("rejected", StatusOutcome.NEGATIVE),
    (DocumentStatus.UNDER_REVIEW, StatusOutcome.PENDING),
    (SubmissionStatus.SUBMITTED, StatusOutcome.PENDING),
    (None, StatusOutcome.PENDING),
])
def test_status_outcome(status, outcome):
    assert status_outcome(status) == outcome


def test_members_compare_equal_to_raw_values():
    assert DocumentStatus.SUBMITTED == "submitted"
