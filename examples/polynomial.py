"""Polynomial: f(x) = x^2 + x + 5.

Only plain arithmetic nodes; there is nothing to constrain.

    hintgraph eval examples/polynomial.py -i examples/polynomial.toml
"""

import hintgraph as hg

circuit = hg.GraphBuilder("polynomial")

x = circuit.init(label="x")
x_squared = circuit.mul(x, x, label="x^2")
five = circuit.constant(5, label="5")
x_squared_plus_x = circuit.add(x_squared, x, label="x^2 + x")
result = circuit.add(x_squared_plus_x, five, label="f(x)")
