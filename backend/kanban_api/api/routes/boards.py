import logging
from fastapi import APIRouter, Depends, Response, status
from kanban_api.api.dependencies import (
    Principal,
    get_board_service,
    get_board_write,
    get_current_principal,
)
from kanban_api.api.schemas import BoardEnvelope, BoardListEnvelope, BoardOut, BoardWrite
from kanban_api.services.board_service import BoardService

logger = logging.getLogger(__name__)

# Every route here requires a valid bearer token
router = APIRouter(prefix="/boards", tags=["boards"])

# Boards have no owner: any authenticated user can read or change any board


@router.get("", response_model=BoardListEnvelope)
def list_boards(
    _: Principal = Depends(get_current_principal),
    board_service: BoardService = Depends(get_board_service),
):
    """List all boards, newest first"""
    boards = board_service.list_boards()
    return BoardListEnvelope(data=[BoardOut.model_validate(board) for board in boards])


@router.post("", response_model=BoardEnvelope, status_code=status.HTTP_201_CREATED)
def create_board(
    body: BoardWrite = Depends(get_board_write),
    principal: Principal = Depends(get_current_principal),
    board_service: BoardService = Depends(get_board_service),
):
    """Create a new board"""
    board = board_service.create_board(body.title)
    logger.info("User %s created board %s", principal.user_id, board.id)
    return BoardEnvelope(data=BoardOut.model_validate(board))


@router.get("/{board_id}", response_model=BoardEnvelope)
def get_board(
    board_id: str,
    _: Principal = Depends(get_current_principal),
    board_service: BoardService = Depends(get_board_service),
):
    """Get a specific board"""
    return BoardEnvelope(data=BoardOut.model_validate(board_service.get_board(board_id)))


@router.put("/{board_id}", response_model=BoardEnvelope)
def update_board(
    board_id: str,
    body: BoardWrite = Depends(get_board_write),
    principal: Principal = Depends(get_current_principal),
    board_service: BoardService = Depends(get_board_service),
):
    """Rename a board"""
    board = board_service.update_board(board_id, body.title)
    logger.info("User %s updated board %s", principal.user_id, board_id)
    return BoardEnvelope(data=BoardOut.model_validate(board))


@router.delete("/{board_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_board(
    board_id: str,
    principal: Principal = Depends(get_current_principal),
    board_service: BoardService = Depends(get_board_service),
):
    """Delete a board"""
    board_service.delete_board(board_id)
    logger.info("User %s deleted board %s", principal.user_id, board_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
