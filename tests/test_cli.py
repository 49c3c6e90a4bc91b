from typer.testing import CliRunner

from time_logger.cli import app

runner = CliRunner()


def test_add_list_and_summary(tmp_path):
    records = str(tmp_path / "records")

    added = runner.invoke(
        app,
        ["add", "Meeting", "09:00 AM", "10:00 AM", "--notes", "Standup", "--date", "2024-03-15", "--records", records],
    )
    assert added.exit_code == 0, added.output
    assert "09:00 AM - 10:00 AM Meeting" in added.output

    listed = runner.invoke(app, ["list", "--date", "2024-03-15", "--records", records])
    assert listed.exit_code == 0
    assert "1 entries, 1h 0m" in listed.output

    summary = runner.invoke(
        app, ["summary", "--date", "2024-03-15", "--range", "Week", "--records", records]
    )
    assert summary.exit_code == 0
    assert "Friday, Mar 15, 2024" in summary.output
    assert "Week - Mar 11-Mar 17, 2024" in summary.output
    assert "1h 00m" in summary.output


def test_add_rejects_invalid_range(tmp_path):
    result = runner.invoke(
        app,
        ["add", "Meeting", "10:00 AM", "09:00 AM", "--notes", "x", "--date", "2024-03-15", "--records", str(tmp_path)],
    )
    assert result.exit_code == 1
    assert "Invalid Time Range" in result.output


def test_delete_unknown_entry(tmp_path):
    result = runner.invoke(
        app,
        ["delete", "00000000-0000-0000-0000-000000000000", "--date", "2024-03-15", "--records", str(tmp_path)],
    )
    assert result.exit_code == 1


def test_summary_without_records(tmp_path):
    result = runner.invoke(
        app, ["summary", "--date", "2024-03-15", "--records", str(tmp_path / "none")]
    )
    assert result.exit_code == 0
    assert "No activity recorded" in result.output
