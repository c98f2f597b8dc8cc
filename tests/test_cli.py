from stormdmg import cli


def test_cli_prints_tables(scenario_csv, capsys):
    assert cli.main(["--data", str(scenario_csv), "--top", "3"]) == 0
    out = capsys.readouterr().out
    assert "Analysed 3 events." in out
    assert out.count("Top 3:") == 6
    assert "TORNADO" in out


def test_cli_writes_charts_and_report(scenario_csv, tmp_path, capsys):
    charts = tmp_path / "charts"
    report = tmp_path / "report.docx"
    rc = cli.main(["--data", str(scenario_csv), "--charts", str(charts), "--report", str(report)])
    assert rc == 0
    assert (charts / "health.png").exists()
    assert (charts / "economic.png").exists()
    assert report.exists()


def test_cli_unknown_code_fails(tmp_path, capsys):
    path = tmp_path / "s.csv"
    path.write_text(
        "REFNUM,EVTYPE,FATALITIES,INJURIES,PROPDMG,PROPDMGEXP,CROPDMG,CROPDMGEXP\n"
        "1,HAIL,1,0,5,9,0,\n"
    )
    assert cli.main(["--data", str(path)]) == 1
    captured = capsys.readouterr()
    assert "Unknown damage exponent code: '9'" in captured.err
    assert "Top" not in captured.out


def test_cli_unknown_code_skip(tmp_path, capsys):
    path = tmp_path / "s.csv"
    path.write_text(
        "REFNUM,EVTYPE,FATALITIES,INJURIES,PROPDMG,PROPDMGEXP,CROPDMG,CROPDMGEXP\n"
        "1,HAIL,1,0,5,9,0,\n"
        "2,WIND,2,0,5,K,0,\n"
    )
    assert cli.main(["--data", str(path), "--on-unknown", "skip"]) == 0
    assert "Skipped 1 record(s)" in capsys.readouterr().out


def test_cli_missing_column_fails(tmp_path, capsys):
    path = tmp_path / "s.csv"
    path.write_text("REFNUM,EVTYPE\n1,HAIL\n")
    assert cli.main(["--data", str(path)]) == 1
    assert "Missing required field(s)" in capsys.readouterr().err


def test_cli_missing_file_fails(tmp_path, capsys):
    assert cli.main(["--data", str(tmp_path / "none.csv")]) == 1
    assert "not found" in capsys.readouterr().err


def test_cli_non_numeric_count_fails(tmp_path, capsys):
    path = tmp_path / "s.csv"
    path.write_text(
        "REFNUM,EVTYPE,FATALITIES,INJURIES,PROPDMG,PROPDMGEXP,CROPDMG,CROPDMGEXP\n"
        "1,HAIL,lots,0,5,K,0,\n"
    )
    assert cli.main(["--data", str(path)]) == 1
    captured = capsys.readouterr()
    assert captured.err.startswith("error: FATALITIES must be a number")
    assert "Top" not in captured.out


def test_cli_infinite_values_fail(tmp_path, capsys):
    path = tmp_path / "s.csv"
    path.write_text(
        "REFNUM,EVTYPE,FATALITIES,INJURIES,PROPDMG,PROPDMGEXP,CROPDMG,CROPDMGEXP\n"
        "1,HAIL,inf,0,5,K,0,\n"
    )
    assert cli.main(["--data", str(path)]) == 1
    assert "FATALITIES must be a finite non-negative number" in capsys.readouterr().err

    path.write_text(
        "REFNUM,EVTYPE,FATALITIES,INJURIES,PROPDMG,PROPDMGEXP,CROPDMG,CROPDMGEXP\n"
        "1,HAIL,0,0,inf,K,0,\n"
    )
    assert cli.main(["--data", str(path)]) == 1
    assert "PROPDMG must be a finite non-negative number" in capsys.readouterr().err
