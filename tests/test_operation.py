from purelzma.operation import Literal, Match


def test_match_len_and_str():
    m = Match(5, 3)
    assert len(m) == 3
    assert str(m) == "M{5,3}"


def test_match_equality():
    assert Match(4, 2) == Match(4, 2)
    assert Match(4, 2) != Match(4, 3)


def test_literal_len():
    assert len(Literal(0x41)) == 1
    assert len(Literal(0)) == 1


def test_literal_str_printable():
    assert str(Literal(0x41)) == "L{A/41}"


def test_literal_str_non_printable():
    assert str(Literal(0)) == "L{./00}"
    assert str(Literal(0x0A)) == "L{./0a}"