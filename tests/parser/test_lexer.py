"""Tests for the descriptor lexer."""

from godesc.diagnostics import DiagnosticCode
from godesc.lang.parser.grammar.lexer import Lexer, TokenType, tokenize


def token_types(source):
    return [token.type for token in tokenize(source)]


class TestBasicTokens:
    """Punctuation, names and scalars."""

    def test_field_tokens(self):
        tokens = tokenize('id: "sprite"')
        assert [t.type for t in tokens] == [
            TokenType.IDENTIFIER,
            TokenType.COLON,
            TokenType.STRING,
            TokenType.EOF,
        ]
        assert tokens[0].value == "id"
        assert tokens[2].value == "sprite"

    def test_braces(self):
        assert token_types("position { }") == [
            TokenType.IDENTIFIER,
            TokenType.LBRACE,
            TokenType.RBRACE,
            TokenType.EOF,
        ]

    def test_enum_and_identifier(self):
        tokens = tokenize("type: COLLISION_OBJECT_TYPE_KINEMATIC flag: true")
        assert tokens[2].type == TokenType.ENUM
        assert tokens[2].value == "COLLISION_OBJECT_TYPE_KINEMATIC"
        assert tokens[5].type == TokenType.IDENTIFIER
        assert tokens[5].value == "true"

    def test_positions_are_one_based(self):
        tokens = tokenize('a: 1\n  b: 2')
        b = tokens[3]
        assert b.value == "b"
        assert (b.line, b.column) == (2, 3)

    def test_comments_are_skipped(self):
        assert token_types("# header\nx: 1 # trailing\n") == [
            TokenType.IDENTIFIER,
            TokenType.COLON,
            TokenType.NUMBER,
            TokenType.EOF,
        ]


class TestNumbers:
    """Numeric literals."""

    def test_number_forms(self):
        for text in ("0", "-3", "+2", "0.5", "-3.5058432", ".25", "1.0E-6", "1e+3", "10."):
            tokens = tokenize(text)
            assert tokens[0].type == TokenType.NUMBER, text
            assert tokens[0].value == text

    def test_malformed_number(self):
        lexer = Lexer("x: 1.2.3")
        tokens = lexer.tokenize()
        assert tokens[2].type == TokenType.INVALID
        assert len(lexer.errors) == 1
        assert lexer.errors[0].diagnostic_code == DiagnosticCode.LEX_MALFORMED_NUMBER

    def test_number_with_letters_is_malformed(self):
        lexer = Lexer("x: 12abc")
        lexer.tokenize()
        assert lexer.errors[0].diagnostic_code == DiagnosticCode.LEX_MALFORMED_NUMBER


class TestStrings:
    """Quoted literals and adjacent-literal joining."""

    def test_escapes(self):
        tokens = tokenize(r'"a\"b\\c\nd\te"')
        assert tokens[0].value == 'a"b\\c\nd\te'

    def test_single_quotes(self):
        tokens = tokenize("'it''s'")
        assert tokens[0].type == TokenType.STRING
        assert tokens[0].value == "its"

    def test_adjacent_literals_are_joined(self):
        tokens = tokenize('data: "a: 1\\n"\n  "b: 2\\n"\n  ""\n}')
        assert tokens[2].type == TokenType.STRING
        assert tokens[2].value == "a: 1\nb: 2\n"
        assert tokens[3].type == TokenType.RBRACE

    def test_literals_separated_by_a_name_stay_apart(self):
        tokens = tokenize('"a" x "b"')
        assert [t.type for t in tokens[:3]] == [TokenType.STRING, TokenType.IDENTIFIER, TokenType.STRING]

    def test_character_positions_follow_source(self):
        tokens = tokenize('"ab"\n"c"')
        assert tokens[0].value == "abc"
        assert tokens[0].char_positions == ((1, 2), (1, 3), (2, 2))

    def test_escape_position_is_the_backslash(self):
        tokens = tokenize(r'"\n"')
        assert tokens[0].char_positions == ((1, 2),)

    def test_unterminated_string(self):
        lexer = Lexer('id: "sprite\ncomponent: "x"')
        tokens = lexer.tokenize()
        assert tokens[2].type == TokenType.INVALID
        assert lexer.errors[0].diagnostic_code == DiagnosticCode.LEX_UNTERMINATED_STRING
        assert (lexer.errors[0].line, lexer.errors[0].column) == (1, 5)
        # Lexing resumes on the next line.
        assert tokens[3].value == "component"

    def test_unknown_escape(self):
        lexer = Lexer(r'"bad \q escape"')
        tokens = lexer.tokenize()
        assert tokens[0].type == TokenType.INVALID
        assert lexer.errors[0].diagnostic_code == DiagnosticCode.LEX_UNKNOWN_ESCAPE
        assert lexer.errors[0].column == 6


class TestUnexpectedCharacters:

    def test_unexpected_character(self):
        lexer = Lexer("id: @")
        tokens = lexer.tokenize()
        assert tokens[2].type == TokenType.INVALID
        assert tokens[2].value == "@"
        assert lexer.errors[0].diagnostic_code == DiagnosticCode.LEX_UNEXPECTED_CHARACTER
        assert lexer.errors[0].reported is True

    def test_eof_token_always_last(self):
        tokens = tokenize("")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF
        assert tokens[0].describe() == "end of input"
