import pytest

pytest.importorskip("PyQt5")

from slidercrank.explain import ExplanationError, UNAVAILABLE_MESSAGE
from slidercrank.explain_worker import ExplanationWorker
from slidercrank.kinematics import KinematicsAnalyzer, MechanismConfiguration


class StubClient:
    def __init__(self, text=None, exc=None):
        self.text = text
        self.exc = exc
        self.calls = []

    def explain(self, config, state):
        self.calls.append((config, state))
        if self.exc is not None:
            raise self.exc
        return self.text


@pytest.fixture()
def analyzer() -> KinematicsAnalyzer:
    return KinematicsAnalyzer(MechanismConfiguration(5.0, 8.0, 10.0, 45.0))


def run_worker(worker):
    events = []
    worker.signals.result.connect(lambda rid, text: events.append(("result", rid, text)))
    worker.signals.failed.connect(lambda rid, msg: events.append(("failed", rid, msg)))
    worker.signals.finished.connect(lambda rid: events.append(("finished", rid)))
    worker.run()
    return events


class TestExplanationWorker:
    def test_result(self, analyzer) -> None:
        client = StubClient(text="Past top dead center.")
        worker = ExplanationWorker(3, analyzer.config, analyzer.state, client=client)

        events = run_worker(worker)

        assert events == [("result", 3, "Past top dead center."), ("finished", 3)]
        assert client.calls == [(analyzer.config, analyzer.state)]

    @pytest.mark.parametrize("exc", [ExplanationError("API key is missing"), RuntimeError("boom"), KeyError("x")])
    def test_failure_reports_static_message(self, analyzer, exc) -> None:
        config, state, cycle = analyzer.config, analyzer.state, analyzer.cycle
        worker = ExplanationWorker(7, config, state, client=StubClient(exc=exc))

        events = run_worker(worker)

        assert events == [("failed", 7, UNAVAILABLE_MESSAGE), ("finished", 7)]
        assert analyzer.config is config
        assert analyzer.state is state
        assert analyzer.cycle is cycle
