from time import time_ns
from domain.ports import Clock

# epoch em milissegundos (int), relógio de parede
class SystemClock(Clock):
    def now_ms(self) -> int:
        return time_ns() // 1_000_000
