from fastapi import APIRouter, HTTPException, Depends
from typing import List

from database.manager import LocalStore
from shared.models import HabitUpdate, HabitResponse, ReorderRequest
from ..dependencies import get_store, get_current_user_id

router = APIRouter(prefix="/api/habits", tags=["habits"])

@router.get("/", response_model=List[HabitResponse])
def list_habits(
    store: LocalStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id)
):
    """
    Привычки текущего пользователя в порядке order_index
    """
    return [habit.to_dict() for habit in store.get_habits(user_id)]

@router.post("/reorder", response_model=List[HabitResponse])
def reorder_habits(
    payload: ReorderRequest,
    store: LocalStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id)
):
    """
    Новый порядок привычек: позиция в списке становится order_index.
    Неизвестные ID пропускаются.
    """
    store.reorder_habits(user_id, payload.habit_ids)
    return [habit.to_dict() for habit in store.get_habits(user_id)]

@router.get("/{habit_id}", response_model=HabitResponse)
def get_habit(
    habit_id: str,
    store: LocalStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id)
):
    habit = store.get_habit(user_id, habit_id)
    if habit is None:
        raise HTTPException(status_code=404, detail=f"Привычка {habit_id} не найдена")
    return habit.to_dict()

@router.put("/{habit_id}", response_model=HabitResponse)
def save_habit(
    habit_id: str,
    payload: HabitUpdate,
    store: LocalStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id)
):
    """
    Создать или обновить привычку (переданные поля перекрывают сохраненные)
    """
    habit = store.save_habit(user_id, {"id": habit_id, **payload.model_dump(exclude_none=True)})
    return habit.to_dict()

@router.delete("/{habit_id}", status_code=204)
def delete_habit(
    habit_id: str,
    store: LocalStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id)
):
    """
    Удалить привычку вместе со всеми ее отметками
    """
    store.delete_habit(user_id, habit_id)
