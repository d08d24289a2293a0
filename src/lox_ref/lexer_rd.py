"""
Lexer for Lox - Recursive Descent Parser

Tokenizes Lox source code into a list of tokens.

Features:
- Single-pass, eager tokenization (the parser expects the full list)
- Position tracking (line, column)
- Line and block comments
- Best-effort recovery: lexical errors go to the diagnostics sink and
  scanning continues with the next character
"""

from typing import List, Optional

from .diagnostics import Diagnostics
from .token_types import TT, Tok

# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """
    Lox lexer.

    Tokens carry the 1-based line they start on; the trailing EOF token
    carries the last line of input.
    """

    # Keyword mapping
    KEYWORDS = {
        'and': TT.AND,
        'class': TT.CLASS,
        'else': TT.ELSE,
        'false': TT.FALSE,
        'for': TT.FOR,
        'fun': TT.FUN,
        'if': TT.IF,
        'nil': TT.NIL,
        'or': TT.OR,
        'print': TT.PRINT,
        'return': TT.RETURN,
        'super': TT.SUPER,
        'this': TT.THIS,
        'true': TT.TRUE,
        'var': TT.VAR,
        'while': TT.WHILE,
    }

    # Operator mapping: longest matches first to handle prefixes correctly
    OPERATORS = [
        # Two-character operators
        ('!=', TT.BANG_EQUAL),
        ('==', TT.EQUAL_EQUAL),
        ('<=', TT.LESS_EQUAL),
        ('>=', TT.GREATER_EQUAL),

        # Single-character operators
        ('!', TT.BANG),
        ('=', TT.EQUAL),
        ('<', TT.LESS),
        ('>', TT.GREATER),
        ('+', TT.PLUS),
        ('-', TT.MINUS),
        ('*', TT.STAR),
        ('/', TT.SLASH),
        ('(', TT.LEFT_PAREN),
        (')', TT.RIGHT_PAREN),
        ('{', TT.LEFT_BRACE),
        ('}', TT.RIGHT_BRACE),
        (',', TT.COMMA),
        ('.', TT.DOT),
        (';', TT.SEMICOLON),
    ]

    def __init__(self, source: str, diagnostics: Optional[Diagnostics] = None):
        self.source = source
        self.diagnostics = diagnostics
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Tok] = []

        # Start of the token being scanned
        self.start = 0
        self.start_line = 1
        self.start_column = 1

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list"""
        while self.pos < len(self.source):
            self.start = self.pos
            self.start_line = self.line
            self.start_column = self.column
            self.scan_token()

        self.start = self.pos
        self.start_line = self.line
        self.start_column = self.column
        self.emit(TT.EOF, '')
        return self.tokens

    def scan_token(self):
        """Scan next token"""
        # Skip whitespace and newlines
        if self.skip_whitespace():
            return

        # Comments
        if self.source.startswith('//', self.pos):
            self.skip_comment()
            return
        if self.source.startswith('/*', self.pos):
            self.skip_block_comment()
            return

        # String literals
        if self.peek() == '"':
            self.scan_string()
            return

        # Numbers
        if self.is_digit(self.peek()):
            self.scan_number()
            return

        # Identifiers and keywords
        if self.is_ident_start(self.peek()):
            self.scan_identifier()
            return

        # Operators and punctuation
        self.scan_operator()

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_string(self):
        """Scan string literal: "..." (may span lines, no escapes)"""
        self.advance()  # Opening quote

        while self.pos < len(self.source) and self.peek() != '"':
            self.advance()

        if self.pos >= len(self.source):
            self.error(self.start_line, "Unterminated string.")
            return

        self.advance()  # Closing quote
        content = self.source[self.start + 1:self.pos - 1]
        self.emit(TT.STRING, self.lexeme(), content)

    def scan_number(self):
        """Scan number literal"""
        # Integer part
        while self.is_digit(self.peek()):
            self.advance()

        # Decimal part; a bare trailing '.' is left for the parser
        if self.peek() == '.' and self.is_digit(self.peek(1)):
            self.advance()
            while self.is_digit(self.peek()):
                self.advance()

        text = self.lexeme()
        self.emit(TT.NUMBER, text, float(text))

    def scan_identifier(self):
        """Scan identifier or keyword"""
        while self.is_ident_part(self.peek()):
            self.advance()

        value = self.lexeme()
        token_type = self.KEYWORDS.get(value, TT.IDENTIFIER)
        self.emit(token_type, value)

    def scan_operator(self):
        """Scan operators and punctuation"""
        for op_str, op_type in self.OPERATORS:
            if self.source.startswith(op_str, self.pos):
                self.advance(len(op_str))
                self.emit(op_type, op_str)
                return

        ch = self.advance()
        self.error(self.start_line, f"Unexpected character '{ch}'.")

    # ========================================================================
    # Utilities
    # ========================================================================

    @staticmethod
    def is_digit(ch: str) -> bool:
        return '0' <= ch <= '9'

    @staticmethod
    def is_ident_start(ch: str) -> bool:
        return ch == '_' or ('a' <= ch <= 'z') or ('A' <= ch <= 'Z')

    @classmethod
    def is_ident_part(cls, ch: str) -> bool:
        return cls.is_ident_start(ch) or cls.is_digit(ch)

    def lexeme(self) -> str:
        return self.source[self.start:self.pos]

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self, n: int = 1) -> str:
        """Consume n characters and return them as a string"""
        if n < 0:
            raise ValueError(f"advance() requires n >= 0, got {n}")
        result = ''
        for _ in range(n):
            ch = self.source[self.pos] if self.pos < len(self.source) else '\0'
            result += ch
            self.pos += 1
            if ch == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
        return result

    def skip_whitespace(self) -> bool:
        """Skip whitespace including newlines, return True if any skipped"""
        skipped = False
        while self.peek() in (' ', '\t', '\r', '\n'):
            self.advance()
            skipped = True
        return skipped

    def skip_comment(self):
        """Skip comment until end of line"""
        while self.peek() not in ('\n', '\0'):
            self.advance()

    def skip_block_comment(self):
        """Skip /* ... */, which may span lines"""
        self.advance(2)

        while self.pos < len(self.source):
            if self.source.startswith('*/', self.pos):
                self.advance(2)
                return
            self.advance()

        self.error(self.start_line, "Unterminated block comment.")

    def emit(self, token_type: TT, lexeme: str, literal=None):
        """Emit a token"""
        tok = Tok(
            type=token_type,
            lexeme=lexeme,
            literal=literal,
            line=self.start_line,
            column=self.start_column,
        )
        self.tokens.append(tok)

    def error(self, line: int, message: str):
        if self.diagnostics is None:
            raise LexError(message, line)
        self.diagnostics.report(line, "", message)

class LexError(Exception):
    """Lexical analysis error"""
    def __init__(self, message: str, line: int):
        self.message = message
        self.line = line
        super().__init__(f"{message} at line {line}")

def tokenize(source: str, diagnostics: Optional[Diagnostics] = None) -> List[Tok]:
    """Convenience function to tokenize source"""
    lexer = Lexer(source, diagnostics=diagnostics)
    return lexer.tokenize()
