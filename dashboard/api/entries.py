from fastapi import APIRouter, HTTPException, Depends, Query, Request
from typing import List, Optional

from database.manager import LocalStore
from shared.models import EntryUpdate, EntryResponse
from utils.datetime_utils import today_str
from ..dependencies import get_store, get_current_user_id

router = APIRouter(prefix="/api/entries", tags=["entries"])

@router.get("/", response_model=List[EntryResponse])
def list_entries(
    store: LocalStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id),
    habit_id: Optional[str] = Query(None),
    date: Optional[str] = Query(None)
):
    """
    Отметки пользователя с фильтрами по привычке и дате
    """
    return [entry.to_dict() for entry in store.get_habit_entries(user_id, habit_id=habit_id, date=date)]

@router.get("/today", response_model=List[EntryResponse])
def list_today_entries(
    request: Request,
    store: LocalStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id)
):
    """
    Отметки за сегодня в часовом поясе приложения
    """
    today = today_str(request.app.state.services.config.timezone)
    return [entry.to_dict() for entry in store.get_habit_entries(user_id, date=today)]

@router.get("/{habit_id}/{date}", response_model=EntryResponse)
def get_entry(
    habit_id: str,
    date: str,
    store: LocalStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id)
):
    entry = store.get_habit_entry(user_id, habit_id, date)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Отметка {habit_id} за {date} не найдена")
    return entry.to_dict()

@router.put("/{habit_id}/{date}", response_model=EntryResponse)
def save_entry(
    habit_id: str,
    date: str,
    payload: EntryUpdate,
    store: LocalStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id)
):
    """
    Создать или полностью заменить отметку за день
    """
    entry = store.save_habit_entry(
        user_id, habit_id, date,
        value=payload.value,
        fasting_hours=payload.fasting_hours,
        note=payload.note
    )
    return entry.to_dict()

@router.delete("/{habit_id}/{date}", status_code=204)
def delete_entry(
    habit_id: str,
    date: str,
    store: LocalStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id)
):
    store.delete_habit_entry(user_id, habit_id, date)
