"""Division with a hint: f(a) = (a + 1) / 8.

The graph has no division node, so the quotient is supplied by a hint and
tied back to the graph with the constraint ``c * 8 == a + 1``. The constraint
only holds when ``a + 1`` is a multiple of 8; try ``a = 16`` to see it fail.

    hintgraph eval examples/division.py -i examples/division.toml --check
"""

import hintgraph as hg

circuit = hg.GraphBuilder("division")

a = circuit.init(label="a")
one = circuit.constant(1, label="1")
b = circuit.add(a, one, label="a + 1")
eight = circuit.constant(8, label="8")


@circuit.hint([b], label="(a + 1) / 8")
def c(values):
    return values[b.id] // 8


c_times_8 = circuit.mul(c, eight, label="c * 8")
circuit.assert_equal(c_times_8, b)
