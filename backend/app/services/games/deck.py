import random
import uuid
from dataclasses import dataclass
from typing import Iterable, List, Optional


@dataclass(frozen=True)
class Tile:
    id: str
    symbol: str

    def to_dict(self, face_up: bool = True):
        return {
            'id': self.id,
            'symbol': self.symbol if face_up else None,
        }


def _tile_id(rng: random.Random) -> str:
    return uuid.UUID(int=rng.getrandbits(128), version=4).hex


def build_deck(symbols: Iterable[str], rng: Optional[random.Random] = None) -> List[Tile]:
    """Build a shuffled deck holding exactly two tiles per distinct symbol.

    Ids and order are both drawn from ``rng`` so a seeded source yields a
    reproducible deck. Repeated symbols in the input are collapsed.
    """
    rng = rng or random.Random()
    distinct = list(dict.fromkeys(symbols))
    tiles = []
    for symbol in distinct:
        tiles.append(Tile(id=_tile_id(rng), symbol=symbol))
        tiles.append(Tile(id=_tile_id(rng), symbol=symbol))
    # Random.shuffle is a Fisher-Yates shuffle
    rng.shuffle(tiles)
    return tiles
