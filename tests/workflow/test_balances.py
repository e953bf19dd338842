"""Tests for balance reconciliation."""

import pytest

from points_app.errors import RemoteReadError
from points_app.workflow.balances import BalanceReader

WEI = 10 ** 18


class TestBalanceReader:
    """Test BalanceReader."""

    def test_refresh_without_regular_token(self, session, ledger, account):
        ledger._credit(ledger.universal_address, account, 3 * WEI)

        balances = BalanceReader().refresh(session, "test")

        assert balances.universal == "3.0"
        assert balances.regular is None
        assert balances.regular_token_address is None
        assert session.balances == balances

    def test_refresh_with_regular_token(self, loaded_session, ledger, token_address, account):
        ledger._credit(token_address, account, WEI // 2)

        balances = BalanceReader().refresh(loaded_session, "test")

        assert balances.universal == "0.0"
        assert balances.regular == "0.5"
        assert balances.regular_token_address == token_address

    def test_refresh_is_a_full_reread(self, loaded_session, ledger, token_address, account):
        reader = BalanceReader()
        reader.refresh(loaded_session, "first")

        ledger.balances[(token_address, account)] = 7 * WEI
        balances = reader.refresh(loaded_session, "second")

        assert balances.regular == "7.0"

    def test_failed_read_leaves_cache_untouched(self, loaded_session, ledger, token_address, account):
        reader = BalanceReader()
        ledger._credit(token_address, account, WEI)
        before = reader.refresh(loaded_session, "first")

        ledger.fail_reads()
        with pytest.raises(RemoteReadError):
            reader.refresh(loaded_session, "second")

        assert loaded_session.balances == before

    def test_custom_decimals(self, session, ledger, account):
        ledger._credit(ledger.universal_address, account, 150)
        assert BalanceReader(decimals=2).refresh(session, "test").universal == "1.5"
