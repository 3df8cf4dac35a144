"""Random ``adjective.animal`` handles for new accounts."""

import secrets
from typing import Callable, Sequence

ADJECTIVES: Sequence[str] = (
    "brave", "calm", "clever", "eager", "fancy", "gentle", "happy", "jolly",
    "kind", "lively", "lucky", "mellow", "nimble", "proud", "quiet", "rapid",
    "shiny", "silly", "swift", "witty", "zesty", "bold", "cosmic", "dizzy",
)

ANIMALS: Sequence[str] = (
    "badger", "beaver", "camel", "otter", "falcon", "gecko", "heron", "ibis",
    "jaguar", "koala", "lemur", "marmot", "newt", "ocelot", "panda", "quail",
    "raven", "salmon", "tapir", "urchin", "walrus", "yak", "zebra", "lynx",
)


class UsernameGenerator:
    """Generates handles that are not yet taken according to ``is_taken``."""

    def __init__(self, is_taken: Callable[[str], bool]):
        self._is_taken = is_taken

    def generate(self) -> str:
        base = f"{secrets.choice(ADJECTIVES)}.{secrets.choice(ANIMALS)}"
        candidate = base
        while self._is_taken(candidate):
            candidate = f"{base}{secrets.randbelow(10_000)}"
        return candidate
