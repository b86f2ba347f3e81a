from __future__ import annotations

from pathlib import Path

import pytest

TABLES = {
    "races.csv": [
        "raceId,year,round,circuitId,name,date,time",
        "1,2011,1,1,Australian Grand Prix,2011-03-27,06:00:00",
        "2,2011,2,2,Malaysian Grand Prix,2011-04-10,08:00:00",
    ],
    "drivers.csv": [
        "driverId,driverRef,forename,surname",
        "1,vettel,Sebastian,Vettel",
        "2,hamilton,Lewis,Hamilton",
        "3,webber,Mark,Webber",
    ],
    "constructors.csv": [
        "constructorId,constructorRef,name",
        "1,mclaren,McLaren",
        "9,red_bull,Red Bull",
    ],
    "results.csv": [
        "resultId,raceId,driverId,constructorId",
        "1,1,1,9",
        "2,1,2,1",
        "3,2,1,9",
        "4,2,2,1",
    ],
    "pit_stops.csv": [
        "raceId,driverId,stop,lap,time,duration,milliseconds",
        "1,1,1,16,17:28:24,26.898,26898",
        "1,2,1,12,17:22:34,23.227,23227",
        "2,1,1,14,16:14:10,24.500,24500",
        "2,3,1,20,16:20:41,25.000,25000",
        "2,2,2,30,16:35:02,41:40.000,2500000",
        "99,1,1,5,15:01:00,22.000,22000",
    ],
}


def write_tables(directory: Path) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    for name, lines in TABLES.items():
        (directory / name).write_text("\n".join(lines) + "\n", encoding="utf-8")
    return directory


@pytest.fixture
def tables_dir(tmp_path: Path) -> Path:
    return write_tables(tmp_path / "tables")
