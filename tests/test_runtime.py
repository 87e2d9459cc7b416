"""
Tests for the runtime surface: the marker function and the hoist decorator.

Validates:
  - ephemeral() is the identity on unrewritten call sites
  - @hoist returns a working function that reuses one dict per site
  - Rejected sites in a hoisted function still run through the marker
  - Hoisted functions see later globals and keep the decorators below @hoist
"""

import functools

import pytest
from ephemeralpy import EphemeralTransformer, ephemeral, hoist


# ---------- Test Functions ----------

@hoist
def hoisted_step(x, y):
    return ephemeral({'x': x + 1, 'y': y - 1})


@hoist(prefix='_cell')
def hoisted_cells(values):
    out = []
    for v in values:
        out.append(ephemeral({'v': v})['v'])
    return out


def plain_step(x, y):
    return ephemeral({'x': x + 1, 'y': y - 1})


def rejected_site(obj):
    return ephemeral(obj)


def hoisted_generator(n):
    for i in range(n):
        yield ephemeral({'i': i})


def doubled(fn):
    @functools.wraps(fn)
    def wrapper(*args):
        return {key: value * 2 for key, value in fn(*args).items()}
    return wrapper


@hoist
@doubled
def hoisted_doubled(x):
    return ephemeral({'v': x})


@doubled
@hoist
def doubled_outside(x):
    return ephemeral({'v': x})


@hoist
def uses_later_helper(x):
    return ephemeral({'v': later_helper(x)})


def later_helper(x):
    return x * 10


# ---------- Marker ----------

class TestMarker:
    def test_identity(self):
        record = {'a': 1}
        assert ephemeral(record) is record

    def test_unrewritten_call_allocates(self):
        assert plain_step(1, 2) == {'x': 2, 'y': 1}
        assert plain_step(1, 2) is not plain_step(1, 2)

    def test_result_is_not_frozen(self):
        record = ephemeral({'a': 1})
        record['a'] = 2
        assert record == {'a': 2}


# ---------- Decorator ----------

class TestHoist:
    def test_result_matches_original(self):
        assert hoisted_step(1, 2) == plain_step(1, 2)

    def test_record_is_reused(self):
        first = hoisted_step(1, 2)
        second = hoisted_step(10, 20)
        assert first is second
        assert second == {'x': 11, 'y': 19}

    def test_metadata(self):
        assert hoisted_step.__ephemeral_hoisted__ is True
        assert hoisted_step.__name__ == 'hoisted_step'
        assert hoisted_step.__ephemeral_stats__['sites_rewritten'] == 1
        assert hoisted_step.__ephemeral_original__ is not hoisted_step

    def test_decorator_arguments(self):
        assert hoisted_cells([1, 2, 3]) == [1, 2, 3]
        assert '_cell0' in hoisted_cells.__code__.co_freevars
        assert '_cell0' not in hoisted_cells.__globals__

    def test_generator_function(self):
        gen = EphemeralTransformer().transform_function(hoisted_generator)
        assert [record['i'] for record in gen(3)] == [0, 1, 2]
        first, second = gen(2), gen(2)
        assert next(first) is not next(second)

    def test_rejected_site_is_reported_with_source_line(self):
        transformer = EphemeralTransformer()
        func = transformer.transform_function(rejected_site)

        assert func({'a': 1}) == {'a': 1}
        assert len(transformer.diagnostics) == 1
        diagnostic = transformer.diagnostics[0]
        assert diagnostic.lineno == rejected_site.__code__.co_firstlineno + 1
        assert diagnostic.filename.endswith('test_runtime.py')

    def test_source_unavailable(self):
        with pytest.raises(TypeError):
            EphemeralTransformer().transform_function(len)

    def test_globals_are_live(self):
        assert uses_later_helper(3) == {'v': 30}
        assert uses_later_helper.__globals__ is globals()

    def test_decorators_below_hoist_are_kept(self):
        assert hoisted_doubled(2) == {'v': 4}
        inner = hoisted_doubled.__wrapped__
        assert inner(1) is inner(5)
        assert hoisted_doubled.__ephemeral_stats__['sites_rewritten'] == 1

    def test_decorators_above_hoist_apply_once(self):
        assert doubled_outside(2) == {'v': 4}
        assert doubled_outside.__wrapped__.__ephemeral_hoisted__ is True
