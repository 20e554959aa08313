#   Open Ocean marine data processing
#   Copyright (C) 2025 John Kennedy
#
#   This program is free software: you can redistribute it and/or modify
#   it under the terms of the GNU General Public License as published by
#   the Free Software Foundation, either version 3 of the License, or
#   (at your option) any later version.
#
#   This program is distributed in the hope that it will be useful,
#   but WITHOUT ANY WARRANTY; without even the implied warranty of
#   MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
#   GNU General Public License for more details.
#
#   You should have received a copy of the GNU General Public License
#   along with this program.  If not, see <https://www.gnu.org/licenses/>.
import pytest
import requests

MUR_INFO = """Row Type,Variable Name,Attribute Name,Data Type,Value
attribute,NC_GLOBAL,title,String,"Multi-scale Ultra-high Resolution (MUR) SST Analysis fv04.1, Global, 0.01 degree, Daily"
dimension,time,,double,"nValues=8030, evenlySpaced=false, averageSpacing=1 day 0h 0m 0s"
attribute,time,actual_range,double,"1.0233144E9, 1.7E9"
attribute,time,units,String,seconds since 1970-01-01T00:00:00Z
dimension,latitude,,float,"nValues=17999, evenlySpaced=true, averageSpacing=0.01"
attribute,latitude,actual_range,float,"-89.99, 89.99"
attribute,latitude,units,String,degrees_north
dimension,longitude,,float,"nValues=36000, evenlySpaced=true, averageSpacing=0.01"
attribute,longitude,actual_range,float,"-179.99, 180.0"
attribute,longitude,units,String,degrees_east
variable,analysed_sst,,double,"time, latitude, longitude"
attribute,analysed_sst,long_name,String,Analysed Sea Surface Temperature
attribute,analysed_sst,units,String,degree_C
variable,mask,,byte,"time, latitude, longitude"
attribute,mask,long_name,String,Sea/Land Field Composite Mask
"""

MUR_GRID = """time,latitude,longitude,analysed_sst
UTC,degrees_north,degrees_east,degree_C
2020-01-01T09:00:00Z,30.0,-120.0,15.1
2020-01-01T09:00:00Z,30.0,-119.0,15.3
2020-01-01T09:00:00Z,30.0,-118.0,NaN
2020-01-01T09:00:00Z,31.0,-120.0,14.8
2020-01-01T09:00:00Z,31.0,-119.0,14.9
2020-01-01T09:00:00Z,31.0,-118.0,15.6
2020-01-01T09:00:00Z,32.0,-120.0,14.2
2020-01-01T09:00:00Z,32.0,-119.0,14.4
2020-01-01T09:00:00Z,32.0,-118.0,15.0
"""

TRAWL_INFO = """Row Type,Variable Name,Attribute Name,Data Type,Value
attribute,NC_GLOBAL,cdm_data_type,String,Trajectory
attribute,NC_GLOBAL,title,String,CPS Trawl Life History Haul Catch Data
variable,cruise,,String,
attribute,cruise,long_name,String,Cruise
variable,latitude,,float,
attribute,latitude,actual_range,float,"30.0, 55.0"
attribute,latitude,units,String,degrees_north
variable,longitude,,float,
attribute,longitude,actual_range,float,"-135.0, -117.0"
attribute,longitude,units,String,degrees_east
variable,time,,double,
attribute,time,actual_range,double,"9.0E8, 1.7E9"
attribute,time,units,String,seconds since 1970-01-01T00:00:00Z
variable,scientific_name,,String,
attribute,scientific_name,long_name,String,Scientific Name
variable,subsample_count,,int,
variable,subsample_weight,,float,
attribute,subsample_weight,units,String,kg
"""

TRAWL_ROWS = """cruise,latitude,longitude,time,scientific_name,subsample_count,subsample_weight
,degrees_north,degrees_east,UTC,,,kg
201004,42.5,-125.1,2010-04-12T10:00:00Z,Sardinops sagax,12,3.5
201004,43.1,-125.4,2010-04-14T02:00:00Z,Sardinops sagax,NaN,NaN
201007,44.0,-124.9,2010-07-08T23:00:00Z,Sardinops sagax,30,8.25
201007,45.2,-125.0,2010-07-10T05:00:00Z,Sardinops sagax,6,1.75
"""

NOT_FOUND = """Error {
    code=404;
    message="Not Found: Your query produced no matching results. (nRows = 0)";
}
"""

SERVER = "https://erddap.example.org/erddap"


class FakeResponse:

    def __init__(self, text, status_code=200):
        self.text = text
        self.status_code = status_code


class FakeServer:
    """Stands in for requests.get. Responses are looked up by a substring of the URL."""

    def __init__(self):
        self.responses = {}
        self.urls = []

    def add(self, fragment, text, status_code=200):
        self.responses[fragment] = FakeResponse(text, status_code)

    def get(self, url, headers=None, timeout=None):
        self.urls.append(url)
        for fragment, response in self.responses.items():
            if fragment in url:
                if isinstance(response.text, Exception):
                    raise response.text
                return response
        return FakeResponse('Error {\n    code=404;\n    message="Not Found: no such page";\n}\n', 404)


@pytest.fixture
def server(monkeypatch):
    fake = FakeServer()
    fake.add("info/jplMURSST41/", MUR_INFO)
    fake.add("griddap/jplMURSST41.csv", MUR_GRID)
    fake.add("info/FRDCPSTrawlLHHaulCatch/", TRAWL_INFO)
    fake.add("tabledap/FRDCPSTrawlLHHaulCatch.csv", TRAWL_ROWS)
    monkeypatch.setattr(requests, "get", fake.get)
    return fake
