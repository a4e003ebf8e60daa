from datetime import datetime
import pytz

UTC = pytz.utc

def now_utc() -> datetime:
    return datetime.now(UTC)

def now_iso() -> str:
    # Формат как у JS toISOString(): миллисекунды и суффикс Z
    return now_utc().strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

def today_str(tz_name: str = "UTC") -> str:
    return datetime.now(pytz.timezone(tz_name)).strftime("%Y-%m-%d")
