def mb_to_bytes(n: int) -> int:
    return n << 20

def kb_to_bytes(n: int) -> int:
    return n << 10

def ns_to_ms(ns: int) -> float:
    return ns / 1_000_000
