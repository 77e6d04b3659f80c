"""
Parser tests: tokenization and pipe splitting.
"""

import unittest

from pipesh.exceptions import ParseError, TooManyArgumentsError, PipelineSyntaxError
from pipesh.shell.parser import (
    CommandParser,
    Command,
    Pipeline,
    tokenize,
    split_pipeline,
    PIPE_MARKER,
)


class TestTokenize(unittest.TestCase):
    """Test splitting a line into tokens."""

    def test_simple_line(self):
        """Words separated by single spaces."""
        self.assertEqual(tokenize("ls -la /home"), ['ls', '-la', '/home'])

    def test_collapses_delimiters(self):
        """Runs of spaces, tabs and newlines count as one delimiter."""
        self.assertEqual(
            tokenize("  ls \t\t -la   \n/home\n"),
            ['ls', '-la', '/home']
        )

    def test_other_whitespace_is_text(self):
        """Only space, tab and newline separate tokens."""
        self.assertEqual(tokenize("a\rb c\vd"), ['a\rb', 'c\vd'])

    def test_whitespace_only(self):
        """Blank lines produce no tokens."""
        for line in ("", " ", "\t", "\n", " \t \n "):
            with self.subTest(line=line):
                self.assertEqual(tokenize(line), [])

    def test_rejoin_reproduces_tokens(self):
        """Joining tokens with single spaces and re-tokenizing is stable."""
        samples = [
            ['ls'],
            ['echo', 'hello', 'world'],
            ['grep', '-r', 'needle', '.'],
            [f'arg{i}' for i in range(64)],
        ]
        for tokens in samples:
            with self.subTest(tokens=tokens[:3]):
                self.assertEqual(tokenize(" ".join(tokens)), tokens)

    def test_max_args_is_inclusive(self):
        """Exactly max_args tokens is accepted."""
        line = " ".join(["x"] * 64)
        self.assertEqual(len(tokenize(line, max_args=64)), 64)

    def test_too_many_arguments(self):
        """One token over the limit fails the whole line."""
        line = " ".join(["x"] * 65)
        with self.assertRaises(TooManyArgumentsError) as ctx:
            tokenize(line, max_args=64)

        self.assertEqual(ctx.exception.count, 65)
        self.assertEqual(ctx.exception.limit, 64)
        self.assertIsInstance(ctx.exception, ParseError)

    def test_embedded_pipe_is_text(self):
        """A pipe inside a word is not split out."""
        self.assertEqual(tokenize("ls|wc"), ['ls|wc'])


class TestSplitPipeline(unittest.TestCase):
    """Test turning tokens into a Command or Pipeline."""

    def test_no_marker(self):
        """Tokens without a marker form one Command."""
        parsed = split_pipeline(['ls', '-l'])
        self.assertEqual(parsed, Command(('ls', '-l')))

    def test_marker_removed(self):
        """The marker never appears in either half."""
        parsed = split_pipeline(['cmd1', 'arg', '|', 'cmd2', 'arg'])

        self.assertIsInstance(parsed, Pipeline)
        self.assertEqual(parsed.producer.args, ('cmd1', 'arg'))
        self.assertEqual(parsed.consumer.args, ('cmd2', 'arg'))
        self.assertNotIn(PIPE_MARKER, parsed.producer.args)
        self.assertNotIn(PIPE_MARKER, parsed.consumer.args)

    def test_empty_sides_rejected(self):
        """A marker at either edge rejects the line."""
        for tokens in (['|', 'ls'], ['ls', '|'], ['|']):
            with self.subTest(tokens=tokens):
                with self.assertRaises(PipelineSyntaxError):
                    split_pipeline(tokens)

    def test_second_marker_rejected(self):
        """Only two stages are supported."""
        with self.assertRaises(PipelineSyntaxError) as ctx:
            split_pipeline(['a', '|', 'b', '|', 'c'])
        self.assertEqual(ctx.exception.context['pipes'], 2)


class TestCommandParser(unittest.TestCase):
    """Test the parser facade."""

    def setUp(self):
        self.parser = CommandParser()

    def test_parse_command(self):
        """Plain line gives a Command."""
        cmd = self.parser.parse('ls -la /home')
        self.assertEqual(cmd.name, 'ls')
        self.assertEqual(cmd.args, ('ls', '-la', '/home'))
        self.assertEqual(cmd.argv, ['ls', '-la', '/home'])

    def test_parse_blank(self):
        """Blank line gives an empty Command."""
        cmd = self.parser.parse('   ')
        self.assertIsInstance(cmd, Command)
        self.assertTrue(cmd.is_empty)
        self.assertEqual(cmd.name, '')

    def test_parse_pipeline(self):
        """Pipe line gives a Pipeline."""
        pipeline = self.parser.parse('echo hello | wc')
        self.assertEqual(pipeline.producer.args, ('echo', 'hello'))
        self.assertEqual(pipeline.consumer.args, ('wc',))
        self.assertEqual(str(pipeline), 'echo hello | wc')

    def test_parse_rejects_bad_pipes(self):
        """Leading and trailing markers are usage errors."""
        for line in ('| ls', 'ls |', '  |  '):
            with self.subTest(line=line):
                with self.assertRaises(PipelineSyntaxError) as ctx:
                    self.parser.parse(line)
                self.assertEqual(ctx.exception.message, 'Invalid command usage with pipe')

    def test_custom_limit(self):
        """The argument limit comes from the parser."""
        parser = CommandParser(max_args=2)
        self.assertEqual(parser.parse('a b').args, ('a', 'b'))
        with self.assertRaises(TooManyArgumentsError):
            parser.parse('a b c')

    def test_limit_counts_marker(self):
        """The marker is a token like any other for the limit."""
        parser = CommandParser(max_args=3)
        with self.assertRaises(TooManyArgumentsError):
            parser.parse('a | b c')

    def test_invalid_limit(self):
        """A parser needs room for at least one token."""
        with self.assertRaises(ValueError):
            CommandParser(max_args=0)

    def test_pipeline_requires_both_sides(self):
        """Pipeline values cannot be built with an empty side."""
        with self.assertRaises(PipelineSyntaxError):
            Pipeline(Command(), Command(('ls',)))
        with self.assertRaises(PipelineSyntaxError):
            Pipeline(Command(('ls',)), Command())

    def test_results_are_independent(self):
        """Commands do not share state with the input or each other."""
        first = self.parser.parse('echo one')
        second = self.parser.parse('echo one')

        argv = first.argv
        argv.append('mutated')

        self.assertEqual(first.args, ('echo', 'one'))
        self.assertEqual(first, second)


if __name__ == '__main__':
    unittest.main()
