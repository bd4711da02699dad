import random
from typing import Iterable, List, Optional

DEFAULT_TEXTS = [
    "The quick brown fox jumps over the lazy dog. This sentence contains every letter of the alphabet at least once.",
    "Programming is not about what you know; it's about what you can figure out. The best way to learn is by doing.",
    "In the world of technology, change is the only constant. Adaptation and continuous learning are key to success.",
    "TypeScript is a programming language developed and maintained by Microsoft. It is a strict syntactical superset of JavaScript.",
    "React is a free and open-source front-end JavaScript library for building user interfaces based on UI components.",
]


class TextSupplier:
    """Hands out passages chosen uniformly at random from a fixed corpus."""

    def __init__(self, texts: Iterable[str], rng: Optional[random.Random] = None):
        self.texts: List[str] = [t for t in texts if t and t.strip()]
        if not self.texts:
            raise ValueError('Passage corpus is empty')
        self._rng = rng or random.Random()

    @classmethod
    def from_file(cls, path: str, rng: Optional[random.Random] = None) -> 'TextSupplier':
        with open(path, encoding='utf-8') as fh:
            return cls((line.strip() for line in fh), rng=rng)

    @classmethod
    def from_config(cls, config) -> 'TextSupplier':
        if config.get('TEXTS'):
            return cls(config['TEXTS'])
        if config.get('TEXTS_FILE'):
            return cls.from_file(config['TEXTS_FILE'])
        return cls(DEFAULT_TEXTS)

    def choose(self) -> str:
        return self._rng.choice(self.texts)
