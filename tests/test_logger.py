from logger import StatusLogger


def test_log_step_numbers_steps_and_formats_path():
    logger = StatusLogger()

    first = logger.log_step([0], "intro")
    second = logger.log_step([1, 2, 0], "deep")
    detached = logger.log_step([], "?")

    assert first.message == "step 1: 0 intro"
    assert second.message == "step 2: 1/2/0 deep"
    assert detached.message == "step 3: - ?"
    assert second.level == "STEP"
    assert logger.get_steps_run() == 3


def test_history_is_bounded():
    logger = StatusLogger(max_entries=3)

    for n in range(5):
        logger.log_info(f"message {n}")

    assert [e.message for e in logger.get_all_logs()] == ["message 2", "message 3", "message 4"]
    assert [e.message for e in logger.get_recent_logs(2)] == ["message 3", "message 4"]
    assert logger.get_recent_logs(0) == []


def test_status_and_levels():
    logger = StatusLogger()

    logger.update_status("Loaded demo")
    logger.log_warning("careful")
    logger.log_error("broken")

    assert logger.get_current_status() == "Loaded demo"
    assert [e.level for e in logger.get_all_logs()] == ["INFO", "WARNING", "ERROR"]
    assert str(logger.get_all_logs()[1]).endswith("WARNING: careful")


def test_clear_and_export(tmp_path):
    logger = StatusLogger()
    logger.log_step([0], "intro")
    logger.clear_logs()

    path = tmp_path / "log.txt"
    assert logger.export_logs_to_file(str(path)) is True

    text = path.read_text(encoding="utf-8")
    assert "Action Queue - Log Export" in text
    assert "INFO: Log history cleared" in text
    assert "intro" not in text


def test_export_failure_returns_false(tmp_path):
    logger = StatusLogger()

    assert logger.export_logs_to_file(str(tmp_path / "missing" / "log.txt")) is False
