"""Two inputs: f(x, y) = x * y + x / y.

``x / y`` is a hint that returns 0 when ``y`` is 0, so the constraint
``(x / y) * y == x`` catches both inexact and undefined divisions.

    hintgraph eval examples/mixed.py -i examples/mixed.toml --check
"""

import hintgraph as hg

circuit = hg.GraphBuilder("mixed")

x = circuit.init(label="x")
y = circuit.init(label="y")
x_times_y = circuit.mul(x, y, label="x * y")


@circuit.hint([x, y], label="x / y")
def x_div_y(values):
    if values[y.id] == 0:
        return 0
    return values[x.id] // values[y.id]


div_times_y = circuit.mul(x_div_y, y, label="(x / y) * y")
circuit.assert_equal(div_times_y, x)

result = circuit.add(x_times_y, x_div_y, label="f(x, y)")
