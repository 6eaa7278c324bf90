from datetime import datetime, timedelta

import pytest

from systools import reminder


def test_next_alarm_later_today():
    now = datetime(2024, 5, 1, 9, 0, 15)
    alarm = reminder.next_alarm_time("10:30", now)
    assert alarm.date() == now.date()
    assert (alarm.hour, alarm.minute, alarm.second) == (10, 30, 0)


def test_next_alarm_rolls_over_to_tomorrow():
    now = datetime(2024, 5, 1, 18, 0)
    alarm = reminder.next_alarm_time("07:45", now)
    assert alarm.date() == now.date() + timedelta(days=1)
    assert (alarm.hour, alarm.minute) == (7, 45)


@pytest.mark.parametrize("value", ["00:00", "9:05", "12:30", "23:59"])
def test_next_alarm_is_within_a_day(value):
    now = datetime(2024, 5, 1, 12, 30, 30)
    alarm = reminder.next_alarm_time(value, now)
    assert now <= alarm < now + timedelta(days=1)
    assert alarm.second == 0 and alarm.microsecond == 0


def test_next_alarm_exact_now_is_not_moved():
    now = datetime(2024, 5, 1, 8, 15)
    assert reminder.next_alarm_time("08:15", now) == now


@pytest.mark.parametrize("value", ["24:00", "12:60", "noon", "12:5", "123:45", "", "12:30:00"])
def test_next_alarm_rejects_bad_times(value):
    with pytest.raises(ValueError):
        reminder.next_alarm_time(value, datetime(2024, 5, 1))


def test_set_alarm_requires_time():
    result = reminder.set_alarm({})
    assert result.is_error
    assert result.text() == "Error: time parameter is required in HH:MM format"


def test_set_alarm_invalid_time():
    result = reminder.set_alarm({"time": "25:99"})
    assert result.is_error
    assert result.text().startswith("Invalid time format. Use HH:MM (24-hour format): ")


def test_set_alarm_default_message():
    result = reminder.set_alarm({"time": "03:00"})
    assert not result.is_error
    assert result.text().startswith("Alarm set for ")
    assert result.text().endswith(" with message: Alarm!")


def test_set_alarm_reports_scheduled_time():
    text = reminder.set_alarm({"time": "04:20", "message": "stretch"}).text()
    stamp = text[len("Alarm set for "):].split(" with message: ")[0]
    scheduled = datetime.strptime(stamp, "%Y-%m-%d %H:%M:%S")
    assert (scheduled.hour, scheduled.minute) == (4, 20)
    assert text.endswith("with message: stretch")