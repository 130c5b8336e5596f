import json

import pytest

from vedicengine.cli import build_parser, main

BIRTH_ARGS = [
    "--date", "2000-01-01",
    "--time", "17:30",
    "--tz", "5.5",
    "--lat", "13.08",
    "--lon", "80.27",
]


def _run(capsys, *argv):
    code = main(["--placeholder", *argv])
    captured = capsys.readouterr()
    return code, captured


def test_chart_command(capsys):
    code, captured = _run(capsys, "chart", *BIRTH_ARGS)
    assert code == 0
    payload = json.loads(captured.out)
    assert payload["placeholder"] is True
    assert payload["planets"]["Moon"]["longitude"] == pytest.approx(10.0)


def test_dasha_levels(capsys):
    code, captured = _run(capsys, "dasha", *BIRTH_ARGS)
    assert code == 0
    assert json.loads(captured.out)["sequence"][0]["lord"] == "Ketu"

    code, captured = _run(capsys, "dasha", *BIRTH_ARGS, "--maha", "1")
    assert [p["lord"] for p in json.loads(captured.out)][0] == "Venus"

    code, captured = _run(capsys, "dasha", *BIRTH_ARGS, "--maha", "1", "--bhukti", "0")
    periods = json.loads(captured.out)
    assert len(periods) == 9
    assert periods[0]["level"] == "pratyantar"


def test_current_command(capsys):
    code, captured = _run(capsys, "current", *BIRTH_ARGS, "--target", "2010-06-01T00:00:00Z")
    assert code == 0
    payload = json.loads(captured.out)
    assert payload["mahadasha"]["lord"] == "Venus"


def test_match_command(capsys):
    args = []
    for prefix in ("a", "b"):
        args += [
            f"--{prefix}-date", "2000-01-01",
            f"--{prefix}-time", "12:00",
            f"--{prefix}-tz", "0",
        ]
    code, captured = _run(capsys, "match", *args)
    assert code == 0
    assert json.loads(captured.out)["checks"]["same_nakshatra"] is True


def test_place_lookup(capsys):
    code, captured = _run(capsys, "chart", *BIRTH_ARGS, "--place", "Chennai")
    assert code == 0
    code, captured = _run(capsys, "chart", *BIRTH_ARGS, "--place", "Atlantis")
    assert code == 2
    assert json.loads(captured.err)["code"] == "PLACE_NOT_FOUND"


def test_invalid_date_reports_validation_error(capsys):
    code, captured = _run(
        capsys, "chart", "--date", "2001-02-29", "--time", "10:00", "--tz", "5.5"
    )
    assert code == 2
    assert json.loads(captured.err)["code"] == "VALIDATION_ERROR"


def test_bhukti_requires_maha():
    with pytest.raises(SystemExit):
        main(["--placeholder", "dasha", *BIRTH_ARGS, "--bhukti", "1"])


def test_parser_requires_a_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])
