"""Wire encoding: numbers, compressed programs and transaction payloads."""
