"""Tests for constraint checking."""

from hintgraph import Constraint, ConstraintViolation, GraphBuilder, check_constraints, find_violations


class TestCheckConstraints:
    """Tests for the check_constraints function."""

    def test_no_constraints_is_satisfied(self) -> None:
        assert check_constraints([], {})

    def test_equal_values(self) -> None:
        assert check_constraints([Constraint(left=0, right=1)], {0: 4, 1: 4})

    def test_unequal_values(self) -> None:
        assert not check_constraints([Constraint(left=0, right=1)], {0: 4, 1: 5})

    def test_missing_value_is_a_violation(self) -> None:
        assert not check_constraints([Constraint(left=0, right=1)], {0: 4})

    def test_node_equal_to_itself(self) -> None:
        assert check_constraints([Constraint(left=3, right=3)], {3: 9})

    def test_all_constraints_must_hold(self) -> None:
        constraints = [Constraint(left=0, right=1), Constraint(left=1, right=2)]
        assert not check_constraints(constraints, {0: 1, 1: 1, 2: 2})


class TestFindViolations:
    """Tests for the find_violations function."""

    def test_reports_every_violation_in_order(self) -> None:
        constraints = [
            Constraint(left=0, right=1),
            Constraint(left=0, right=2),
            Constraint(left=1, right=3),
        ]

        violations = find_violations(constraints, {0: 1, 1: 2, 2: 1})

        assert violations == [
            ConstraintViolation(constraint=constraints[0], left_value=1, right_value=2),
            ConstraintViolation(constraint=constraints[2], left_value=2, right_value=None),
        ]

    def test_reason(self) -> None:
        unequal = ConstraintViolation(constraint=Constraint(left=0, right=1), left_value=3, right_value=4)
        missing = ConstraintViolation(constraint=Constraint(left=0, right=1), left_value=None, right_value=None)

        assert unequal.reason == "3 != 4"
        assert missing.reason == "no value for %0, %1"

    def test_no_violations(self) -> None:
        assert find_violations([Constraint(left=0, right=1)], {0: 7, 1: 7}) == []


class TestBuilderChecks:
    """Tests for constraint checks through GraphBuilder."""

    def test_builder_checks_its_own_constraints(self) -> None:
        builder = GraphBuilder()
        x = builder.init()
        y = builder.init()
        builder.assert_equal(x, y)

        assert builder.check_constraints({x.id: 5, y.id: 5})
        assert not builder.check_constraints({x.id: 5, y.id: 6})
        assert len(builder.find_violations({x.id: 5, y.id: 6})) == 1

    def test_values_not_modified(self) -> None:
        builder = GraphBuilder()
        x = builder.init()
        y = builder.init()
        builder.assert_equal(x, y)
        values = {x.id: 1, y.id: 2}

        builder.find_violations(values)

        assert values == {x.id: 1, y.id: 2}
