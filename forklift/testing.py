from __future__ import annotations

from .models import TransactionResult


def assert_txn_success(result: TransactionResult) -> TransactionResult:
    """Fail the calling test unless the transaction executed successfully."""
    assert isinstance(result, TransactionResult), f"expected a TransactionResult, got {type(result).__name__}"
    assert result.succeeded, (
        f"transaction failed: vm_status={result.vm_status!r} hash={result.transaction_hash!r}"
    )
    return result
