"""
Tests for environment configuration and the error hierarchy.
"""

import pytest

from convergence.env import Env, TimeParser, load_env
from convergence.errors import (
    AssertionMismatch,
    ConvergenceTimeout,
    RemoteCallError,
    TransportError,
)


class TestTimeParser:
    """TimeParser.parse."""

    def test_numbers_pass_through(self):
        assert TimeParser().parse(5) == 5.0
        assert TimeParser().parse(0.5) == 0.5

    def test_units(self):
        assert TimeParser().parse("1s") == 1.0
        assert TimeParser().parse("2m") == 120.0
        assert TimeParser().parse("1m30s") == 90.0
        assert TimeParser().parse("0.5") == 0.5

    def test_rejects_garbage(self):
        with pytest.raises(ValueError):
            TimeParser().parse("soon")


class TestEnv:
    """Env defaults and derived settings."""

    def test_default_poll_config(self):
        config = Env().get_poll_config()

        assert config.max_attempts == 60
        assert config.delay == 1.0

    def test_timeouts(self):
        env = Env(CONVERGENCE_HTTP_TIMEOUT="30s", CONVERGENCE_SOFTCOMMIT="2s")

        assert env.get_http_timeout() == 30.0
        assert env.get_rpc_timeout() == 60.0
        assert env.get_softcommit() == 2.0

    def test_load_env_reads_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CONVERGENCE_POLL_MAX_ATTEMPTS", "12")
        monkeypatch.chdir(tmp_path)

        env = load_env()

        assert env.CONVERGENCE_POLL_MAX_ATTEMPTS == 12

    def test_load_env_reads_env_file(self, monkeypatch, tmp_path):
        monkeypatch.delenv("CONVERGENCE_POLL_DELAY", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("CONVERGENCE_POLL_DELAY=3s\nUNRELATED=1\n")

        env = load_env(env_file=str(env_file))

        assert env.get_poll_config().delay == 3.0


class TestErrors:
    """Error messages and hierarchy."""

    def test_timeout_message_names_condition_and_node(self):
        error = ConvergenceTimeout("dev2", "index fruit available", 60)

        assert str(error) == (
            "Condition 'index fruit available' did not converge on node dev2 after 60 attempts"
        )
        assert isinstance(error, AssertionError)
        assert error.failed_nodes == ["dev2"]

    def test_timeout_lists_failed_nodes(self):
        error = ConvergenceTimeout("dev1", "trees built", 5, failed_nodes=["dev1", "dev3"])

        assert "dev1, dev3" in str(error)

    def test_remote_call_error_is_transport_error(self):
        error = RemoteCallError("dev1", "yz_solr", "ping", "nodedown")

        assert isinstance(error, TransportError)
        assert "yz_solr:ping" in str(error)

    def test_assertion_mismatch(self):
        error = AssertionMismatch("search count", 5, 4)

        assert str(error) == "Expected search count 5, got 4"
        assert isinstance(error, AssertionError)
