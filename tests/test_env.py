import pytest

from reviewpad.engine.env import Env, GroupType, Interpreter


class _Interpreter(Interpreter):
    def process_group(self, name, kind, type_of, expr, param_expr, where_expr):
        pass

    def process_label(self, label_id, name):
        pass

    def process_rule(self, name, spec):
        pass

    def eval_expr(self, kind, expr):
        return True

    def exec_program(self, program):
        pass

    def exec_statement(self, statement):
        pass

    def report(self, mode):
        pass


def _pull_request():
    return {
        "id": 1234,
        "number": 6,
        "user": {"login": "john"},
        "title": "Amazing new feature",
        "body": "Please pull these awesome changes in!",
    }


def test_new_eval_env_holds_given_parts():
    client = object()
    collector = object()
    interpreter = _Interpreter()
    payload = {"action": "opened"}

    env = Env(
        dry_run=False,
        client=client,
        collector=collector,
        pull_request=_pull_request(),
        interpreter=interpreter,
        client_gql=None,
        event_payload=payload,
    )

    want = Env(
        dry_run=False,
        client=client,
        collector=collector,
        pull_request=_pull_request(),
        interpreter=interpreter,
        client_gql=None,
        event_payload=payload,
    )

    assert env == want
    assert env.interpreter is interpreter
    assert env.client is client
    assert env.pull_request["title"] == "Amazing new feature"
    assert env.event_payload == payload


def test_env_with_different_dry_run_differs():
    interpreter = _Interpreter()
    wet = Env(False, None, None, _pull_request(), interpreter)
    dry = Env(True, None, None, _pull_request(), interpreter)
    assert (wet == dry) is False
    assert dry.dry_run is True


def test_env_defaults_for_optional_parts():
    env = Env(False, None, None, _pull_request(), _Interpreter())
    assert env.client_gql is None
    assert env.event_payload is None


def test_group_type_lookup():
    assert GroupType("filter") is GroupType.FILTER
    assert GroupType.STATIC == "static"
    with pytest.raises(ValueError):
        GroupType("dynamic")


def test_abstract_interpreter_cannot_be_created():
    with pytest.raises(TypeError):
        Interpreter()