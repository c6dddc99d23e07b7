import pytest

from rrdb.core.errors import FieldsExhaustedError
from rrdb.core.schema import DataSource, SeriesInfo
from rrdb.io.ledger import Claim, ReservationLedger


def _info(*names: str) -> SeriesInfo:
    return SeriesInfo(data_sources=[DataSource(name=n, type_descriptor="GAUGE:600:U:U") for n in names])


def test_ledger_splits_real_and_reserved() -> None:
    ledger = ReservationLedger.from_info(_info("x", "_reserved2", "_reserved0", "y", "_reserved10"))
    assert ledger.real == ("x", "y")
    assert ledger.reserved == ("_reserved0", "_reserved2", "_reserved10")


def test_new_fields_preserve_order_and_skip_known() -> None:
    ledger = ReservationLedger.from_info(_info("x", "_reserved0"))
    assert ledger.new_fields(["b", "x", "a", "b"]) == ["b", "a"]


def test_no_new_fields_plans_nothing() -> None:
    ledger = ReservationLedger.from_info(_info("x", "y", "_reserved0"))
    assert ledger.plan_claims(["y", "x"]) == []


def test_claims_use_lowest_ordinals_first() -> None:
    ledger = ReservationLedger.from_info(_info("x", "_reserved1", "_reserved0", "_reserved2"))
    assert ledger.plan_claims(["x", "b", "a"]) == [
        Claim(reserved="_reserved0", field="b"),
        Claim(reserved="_reserved1", field="a"),
    ]


@pytest.mark.parametrize("k, r", [(1, 1), (2, 3), (3, 2), (1, 0)])
def test_claim_succeeds_iff_enough_reserved(k: int, r: int) -> None:
    ledger = ReservationLedger.from_info(_info("x", *[f"_reserved{i}" for i in range(r)]))
    new = [f"n{i}" for i in range(k)]
    if k <= r:
        claims = ledger.plan_claims(new)
        assert [c.reserved for c in claims] == [f"_reserved{i}" for i in range(k)]
    else:
        with pytest.raises(FieldsExhaustedError) as info:
            ledger.plan_claims(new)
        assert info.value.requested == k
        assert info.value.available == r
