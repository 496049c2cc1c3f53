import logging
from solomon_draft import deck_lists, draft_engine, scryfall
from solomon_draft.logger import LOG_FILE_NAME, LOGGER_NAME, create_logger


def test_create_logger_is_shared():
    assert create_logger() is create_logger()
    assert create_logger().name == LOGGER_NAME
    assert len(create_logger().handlers) >= 1


def test_modules_share_the_application_logger():
    for module in (draft_engine, scryfall, deck_lists):
        assert module.logger is create_logger()


def test_create_logger_adds_one_file_handler(tmp_path):
    log_folder = tmp_path / "logs"
    logger = create_logger(str(log_folder))
    try:
        create_logger(str(log_folder))
        file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].baseFilename == str(log_folder / LOG_FILE_NAME)

        logger.info("Draft started")
        file_handlers[0].flush()
        assert "Draft started" in (log_folder / LOG_FILE_NAME).read_text()
    finally:
        for handler in [h for h in logger.handlers if isinstance(h, logging.FileHandler)]:
            handler.close()
            logger.removeHandler(handler)
