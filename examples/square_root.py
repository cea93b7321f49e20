"""Square root with a hint: f(x) = sqrt(x + 7).

    hintgraph eval examples/square_root.py -i examples/square_root.toml --check
"""

import math

import hintgraph as hg

circuit = hg.GraphBuilder("square_root")

x = circuit.init(label="x")
seven = circuit.constant(7, label="7")
x_plus_7 = circuit.add(x, seven, label="x + 7")
root = circuit.hint([x_plus_7], lambda values: math.isqrt(values[x_plus_7.id]), label="sqrt(x + 7)")
root_squared = circuit.mul(root, root, label="sqrt(x + 7)^2")
circuit.assert_equal(root_squared, x_plus_7)
