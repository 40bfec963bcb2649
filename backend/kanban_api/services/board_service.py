from typing import List
from kanban_api.core.errors import InvalidInputError
from kanban_api.models.board import Board
from kanban_api.repositories.base import BoardRepository

TITLE_REQUIRED_MESSAGE = "title required"


class BoardService:
    """Title validation in front of the board repository"""

    def __init__(self, boards: BoardRepository):
        self._boards = boards

    @staticmethod
    def _clean_title(title: str) -> str:
        cleaned = (title or "").strip()
        if not cleaned:
            raise InvalidInputError(TITLE_REQUIRED_MESSAGE)
        return cleaned

    def list_boards(self) -> List[Board]:
        return self._boards.list()

    def get_board(self, board_id: str) -> Board:
        return self._boards.get(board_id)

    def create_board(self, title: str) -> Board:
        return self._boards.create(self._clean_title(title))

    def update_board(self, board_id: str, title: str) -> Board:
        return self._boards.update(board_id, self._clean_title(title))

    def delete_board(self, board_id: str) -> None:
        self._boards.delete(board_id)
