"""Operator decision points.

The converter never reads input itself. At each decision it hands a
decider a kind ("environment", "p2" or "p1"), a prompt and a list of
candidates, and gets back either one of the candidates or None for
"skip". Where the answers come from (a terminal, a batch file, a test) is
the decider's business.
"""
import click

from util import slurp_json


ENVIRONMENT = "environment"
P2 = "p2"
P1 = "p1"

DECISION_KINDS = (ENVIRONMENT, P2, P1)


class InvalidSelection(ValueError):
    pass


def parse_selection(raw, count):
    """Turn a typed 1-based index into a 0-based one, or None for skip."""
    if raw is None:
        return None
    text = str(raw).strip()
    if not text:
        return None
    try:
        selected = int(text)
    except ValueError:
        raise InvalidSelection(f"'{text}' is not a number")
    if not 1 <= selected <= count:
        raise InvalidSelection(f"{selected} is not between 1 and {count}")
    return selected - 1


class DeclineAll:

    def choose(self, kind, prompt, candidates, describe=str):
        return None


class ConsoleDecider:

    def __init__(self, echo=click.echo, prompt=click.prompt):
        self.echo = echo
        self.prompt = prompt

    def choose(self, kind, prompt, candidates, describe=str):
        candidates = list(candidates)
        if not candidates:
            self.echo(f"{prompt}: nothing to choose from, skipping")
            return None

        self.echo("")
        for (i, candidate) in enumerate(candidates, start=1):
            self.echo(f"  {i:>3}. {describe(candidate)}")

        raw = self.prompt(
            f"{prompt} (Enter to skip)",
            default="",
            show_default=False,
        )
        try:
            index = parse_selection(raw, len(candidates))
        except InvalidSelection as err:
            self.echo(f"Invalid selection: {err}; skipping")
            return None

        return candidates[index] if index is not None else None


class ScriptedDecider:
    """Answers from a batch file or a test, one queue per decision kind.

    An answer is a 1-based index (int or numeric string), "id:<id>" naming
    the candidate directly, or null / "" to skip. Running out of answers
    means skip. Bad answers are skipped too and remembered in `invalid`.
    """

    def __init__(self, answers=None):
        answers = answers or {}
        if not isinstance(answers, dict):
            raise ValueError("Answers must be an object keyed by decision kind")
        unknown = set(answers) - set(DECISION_KINDS)
        if unknown:
            raise ValueError(f"Unknown decision kinds: {sorted(unknown)}")
        bad = [k for (k, v) in answers.items() if not isinstance(v, list)]
        if bad:
            raise ValueError(f"Answers for {sorted(bad)} must be lists")
        self.answers = {kind: list(answers.get(kind, [])) for kind in DECISION_KINDS}
        self.invalid = []

    @classmethod
    def load(cls, path):
        return cls(slurp_json(path))

    def choose(self, kind, prompt, candidates, describe=str):
        candidates = list(candidates)
        queue = self.answers[kind]
        if not queue:
            return None
        raw = queue.pop(0)

        if isinstance(raw, str) and raw.startswith("id:"):
            try:
                wanted = int(raw[len("id:"):])
            except ValueError:
                wanted = None
            if wanted in candidates:
                return wanted
            self.invalid.append((kind, raw, f"{raw[3:]} is not among the candidates"))
            return None

        try:
            index = parse_selection(raw, len(candidates))
        except InvalidSelection as err:
            self.invalid.append((kind, raw, str(err)))
            return None

        return candidates[index] if index is not None else None
