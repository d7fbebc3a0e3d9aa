import unittest

from ocrint.lang.error import UndefinedVariable
from ocrint.lang.symbols import SymbolTable
from ocrint.lang.values import Number, String


class SymbolTableTestCase(unittest.TestCase):

    def test_assign_overwrites(self):
        symbols = SymbolTable()
        symbols.assign("x", Number(1))
        symbols.assign("x", String("one"))
        self.assertEqual(String("one"), symbols.get("x"))
        self.assertIn("x", symbols)

    def test_get_undefined(self):
        symbols = SymbolTable()
        with self.assertRaises(UndefinedVariable) as raised:
            symbols.get("ghost")
        self.assertEqual("ghost", raised.exception.ident)
        self.assertEqual("'ghost' is not defined", str(raised.exception))
        self.assertNotIn("ghost", symbols)


if __name__ == '__main__':
    unittest.main()
