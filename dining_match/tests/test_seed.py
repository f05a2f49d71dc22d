from pathlib import Path

import pytest

from dining_match.config import AppConfig
from dining_match.data_ingestion.seed import load_seed, parse_hours


def test_parse_weekday_range():
    hours = parse_hours("Mon-Fri: 12:00-23:00")
    assert list(hours) == ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]
    assert hours["Monday"] == {"open": "12:00", "close": "23:00"}


def test_parse_daily_overnight():
    hours = parse_hours("Daily: 18:00-00:00")
    assert len(hours) == 7
    assert hours["Sunday"] == {"open": "18:00", "close": "00:00"}


def test_parse_multiple_segments_and_closed_days():
    hours = parse_hours("Tue-Sun: 9:00-22:30; Mon: closed")
    assert hours["Monday"] == {"closed": True}
    assert hours["Tuesday"] == {"open": "09:00", "close": "22:30"}
    assert hours["Sunday"] == {"open": "09:00", "close": "22:30"}


def test_parse_wrapping_range_and_lists():
    assert list(parse_hours("Fri-Sun: 10:00-14:00")) == ["Friday", "Saturday", "Sunday"]
    assert list(parse_hours("Sat,Sun: 10:00-14:00")) == ["Saturday", "Sunday"]


def test_parse_empty():
    assert parse_hours("") == {}
    assert parse_hours(None) == {}


@pytest.mark.parametrize("text", ["Mon-Fri 12:00-23:00", "Mon: noon-late", "Someday: 10:00-12:00"])
def test_parse_rejects_garbage(text):
    with pytest.raises(ValueError):
        parse_hours(text)


def test_packaged_seed_loads():
    restaurants = load_seed(AppConfig().seed_path)
    assert len(restaurants) >= 2

    chef_yam = restaurants[0]
    assert chef_yam.id == 1
    assert chef_yam.name == "Chef Yam"
    assert chef_yam.price_range == "$$$"
    assert chef_yam.address.city == "Tel Aviv"
    assert chef_yam.max_guests == 60
    assert chef_yam.opening_hours["Monday"].open == "12:00"
    assert chef_yam.opening_hours["Saturday"].closed is True


def test_alternate_column_names(tmp_path: Path):
    csv = tmp_path / "restaurants.csv"
    csv.write_text(
        "restaurant_name,cuisines,address,rate,priceRange,hours\n"
        '"Spice Route",Indian,"Jaffa Rd 120, Jerusalem",4.3/5,$$,Daily: 12:00-23:00\n'
        '"Quiet Corner",Cafe,"Herzl 1, Haifa",,$,\n'
    )
    restaurants = load_seed(csv)

    assert [r.id for r in restaurants] == [1, 2]
    assert restaurants[0].rating == 4.3
    assert restaurants[0].price_range == "$$"
    assert restaurants[0].max_guests == 50
    assert restaurants[1].rating is None
    assert restaurants[1].opening_hours == {}


def test_duplicate_ids_rejected(tmp_path: Path):
    csv = tmp_path / "restaurants.csv"
    csv.write_text(
        "id,name,cuisine,address\n"
        '1,Chef Yam,Seafood,"HaNamal St 12, Tel Aviv"\n'
        '1,Mama Roma,Italian,"Ben Yehuda 45, Jerusalem"\n'
    )
    with pytest.raises(ValueError, match="Duplicate restaurant id 1"):
        load_seed(csv)
