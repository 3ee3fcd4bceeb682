"""
Cracks an inbound SCPI line into its component parts.

The grammar is `[SUBJECT:]VERB[?] [ARG[,ARG...]]`. Only the first colon separates the subject,
so further colons are part of the verb (`TRIG:EDGE:DIR`). A '?' anywhere marks a query.
"""
from scpibridge.support.mixins import CommonEqualityMixin, StringerMixin

# the subject that addresses the trigger rather than a channel
TRIGGER_SUBJECT = 'TRIG'

# the C locale whitespace set; other unicode spaces and separators are literal
WHITESPACE = ' \t\n\r\v\f'


class ParsedCommand(CommonEqualityMixin, StringerMixin):
    """
    A tokenized SCPI line.
    :param subject: the object the command operates on, e.g. "C2" in "C2:OFFS 1.0". Empty for
        device-level commands.
    :param verb: the command itself, e.g. "OFFS"
    :param is_query: True when the line contained a '?'
    :param args: the arguments following the verb, as raw text in the order given.
    """

    def __init__(self, subject='', verb='', is_query=False, args=None):
        self.subject = subject
        self.verb = verb
        self.is_query = is_query
        self.args = list(args) if args is not None else []


def is_delimiter(c):
    """
    Comma always delimits arguments. Whitespace delimits the verb from the arguments and,
    once the verb has been read, arguments from each other.

    >>> is_delimiter(',')
    True
    >>> is_delimiter('\\t')
    True
    >>> is_delimiter('\\x1c')
    False
    >>> is_delimiter(':')
    False
    """
    return c == ',' or c in WHITESPACE


def tokenize(line: str) -> ParsedCommand:
    """
    Splits a line into subject, verb, query flag and arguments. Never fails; a line that has no
    verb produces a command with an empty verb.

    >>> tokenize('C1:OFFS 1.0')
    ParsedCommand(args=['1.0'], is_query=False, subject='C1', verb='OFFS')
    >>> tokenize('RATES?')
    ParsedCommand(args=[], is_query=True, subject='', verb='RATES')
    """
    subject = ''
    verb = ''
    is_query = False
    args = []

    tmp = ''
    reading_verb = True
    for c in line:
        # no colon: the first block is the verb. One colon: subject then verb.
        # more than one: the rest are literal text in the verb or arguments.
        if c == ':' and not subject:
            subject = tmp
            tmp = ''
            continue

        if c == '?':
            is_query = True
            continue

        if not is_delimiter(c):
            tmp += c
            continue

        # merge multiple delimiters into one
        if not tmp:
            continue

        if reading_verb:
            verb = tmp
            reading_verb = False
        else:
            args.append(tmp)
        tmp = ''

    # stuff left over at the end belongs in the verb if there isn't one yet
    if tmp:
        if verb:
            args.append(tmp)
        else:
            verb = tmp

    return ParsedCommand(subject, verb, is_query, args)
