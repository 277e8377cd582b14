from dataclasses import dataclass

from genjson.runtime import generate_json


@generate_json
@dataclass
class Item:
    id: int
    name: str
