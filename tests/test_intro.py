from __future__ import annotations

import asyncio

from conftest import FixedRandom, RecordingSurface, settle

from matrix_rain.intro import Intro
from matrix_rain.ui.theme import BACKGROUND, INTRO_STYLE


def test_continuation_fires_once_after_duration(config):
    calls = []

    async def scenario():
        intro = Intro(RecordingSurface(), config).start().then(lambda: calls.append(1))
        await asyncio.sleep(0)
        assert calls == []
        await intro.wait()
        await asyncio.sleep(0.05)
        return intro

    intro = asyncio.run(scenario())
    assert calls == [1]
    assert intro.done
    assert intro.ticks >= 1


def test_missing_continuation_is_harmless(config):
    async def scenario():
        intro = Intro(RecordingSurface(), config).start()
        await intro.wait()
        return intro

    assert asyncio.run(scenario()).done


def test_ends_with_an_opaque_black_fill(config):
    surface = RecordingSurface()

    async def scenario():
        await Intro(surface, config).start().wait()
        await settle()

    asyncio.run(scenario())
    last = surface.calls[-1]
    assert last[0] == "rect"
    assert last[5:] == (BACKGROUND, 1.0)


def test_cancel_skips_the_continuation(config):
    calls = []

    async def scenario():
        intro = Intro(RecordingSurface(), config).start().then(lambda: calls.append(1))
        intro.cancel()
        await intro.wait()
        await asyncio.sleep(0.06)

    asyncio.run(scenario())
    assert calls == []


def test_draw_fills_the_grid_leaving_a_gap_every_16_columns(config):
    surface = RecordingSurface(width=20 * 14, height=5 * 14)
    intro = Intro(surface, config)
    intro.draw()

    background = surface.calls[0]
    assert background[0] == "rect" and background[6] == 0.75

    texts = surface.texts
    columns = {x // 14 for _, _, x, _, *_ in texts}
    rows = {y // 14 for _, _, _, y, *_ in texts}
    assert columns == set(range(1, 20)) - {16}
    assert rows == {1, 2, 3, 4}
    assert len(texts) == 18 * 4
    assert all(t[1] in "123456789π" for t in texts)
    assert all(t[5] == INTRO_STYLE.glow and t[6] > 0 for t in texts)


def test_rare_special_glyph(config):
    surface = RecordingSurface(width=3 * 14, height=3 * 14)
    Intro(surface, config, rng=FixedRandom(0.0)).draw()
    assert {t[1] for t in surface.texts} == {"π"}

    surface = RecordingSurface(width=3 * 14, height=3 * 14)
    Intro(surface, config, rng=FixedRandom(0.5)).draw()
    assert all(t[1].isdigit() for t in surface.texts)
