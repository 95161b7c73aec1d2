import os


def is_developer_mode() -> bool:
    """
    Check if developer mode is activated. In developer mode every row handed out
    by an advancing function is logged on DEBUG level.

    :return: True if developer mode is active, otherwise False
    """
    return False if os.getenv("SQLCORO_DEVELOPER_MODE") is None else True
