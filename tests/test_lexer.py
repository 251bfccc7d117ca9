#!/usr/bin/env python3
"""
Tests for the tokenizer.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

from bfvm.lexer import Token, strip, tokenize


def test_recognized_symbols_in_order():
    assert list(tokenize("><+-.,[]")) == [
        Token.SHIFT_RIGHT,
        Token.SHIFT_LEFT,
        Token.INCREMENT,
        Token.DECREMENT,
        Token.OUTPUT,
        Token.INPUT,
        Token.LOOP_START,
        Token.LOOP_END,
    ]


def test_unrecognized_characters_are_dropped():
    assert list(tokenize("a+b\n-  # comment .")) == [Token.INCREMENT, Token.DECREMENT, Token.OUTPUT]


def test_empty_and_comment_only_source():
    assert list(tokenize("")) == []
    assert list(tokenize("hello world")) == []


def test_stream_is_restartable():
    stream = tokenize("+[-]")
    assert list(stream) == list(stream)
    assert len(list(stream)) == 4


def test_tokenizing_filtered_text_is_idempotent():
    source = "Print A: ++++++++[>++++++++<-]>+. done!"
    assert strip(source) == "++++++++[>++++++++<-]>+."
    assert list(tokenize(strip(source))) == list(tokenize(source))
    assert strip(strip(source)) == strip(source)


def test_positions_point_into_source():
    assert list(tokenize("x+\n[").positions()) == [(1, Token.INCREMENT), (3, Token.LOOP_START)]
