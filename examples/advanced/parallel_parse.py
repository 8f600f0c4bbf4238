"""Explicit config, no shared state — compile 1000 chapters in parallel."""

from concurrent.futures import ThreadPoolExecutor
from functools import partial

from versicle import ParseConfig, parse

config = ParseConfig(recover_lexer_errors=True)
chapters = [f"\\c {i}\n\\p\n\\v 1 Chapter {i}, verse one.\n\\v 2 Verse two." for i in range(1, 1001)]

with ThreadPoolExecutor(max_workers=8) as ex:
    results = list(ex.map(partial(parse, book="PSA", config=config), chapters))

print(f"Compiled {len(results)} chapters in parallel")
print("First chapter verses:", [str(b.ref) for b in results[0].blocks("v")])
print("Last chapter verses:", [str(b.ref) for b in results[-1].blocks("v")])
