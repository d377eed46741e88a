from throne_ocr.constraint_validator import ValidationReport
from throne_ocr.diagnostics import build_diagnostic_lines
from throne_ocr.models import PlayerRecord
from throne_ocr.recognition import RecognitionResult


def _player(name, player_class):
    return PlayerRecord(
        name=name, team="Suits", date="2025-06-14 00:00:00",
        kills=1, assists=2, damage_done=3, damage_received=4, healing=5,
        player_class=player_class,
    )


def test_sections_in_order_with_separators():
    result = RecognitionResult(error_lines=["bad line"])
    report = ValidationReport(
        unknown_class_players=[_player("Who", "UNKNOWN")],
        flagged_players=[_player("Odd", "rogue")],
    )

    assert build_diagnostic_lines(result, report) == [
        "bad line",
        "",
        "",
        "2025-06-14 00:00:00,Suits,Who,UNKNOWN,1,2,3,4,5",
        "",
        "",
        "2025-06-14 00:00:00,Suits,Odd,rogue,1,2,3,4,5",
    ]


def test_empty_sections_are_skipped():
    result = RecognitionResult()
    report = ValidationReport(flagged_players=[_player("Odd", "rogue")])

    assert build_diagnostic_lines(result, report) == ["2025-06-14 00:00:00,Suits,Odd,rogue,1,2,3,4,5"]


def test_nothing_to_report():
    assert build_diagnostic_lines(RecognitionResult(), ValidationReport()) == []
    assert build_diagnostic_lines(RecognitionResult(error_lines=["x"])) == ["x"]
