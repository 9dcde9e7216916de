# -*- coding: utf-8 -*-
"""various utilities not related to optimization"""
import re
import time
import warnings

global_verbosity = 1

def is_str(var):
    """`bytes` also fit the bill.

    >>> from ncopt.utilities.utils import is_str
    >>> assert is_str(b'a') * is_str('a') * is_str(r'b')
    >>> assert not is_str([1]) and not is_str(1)

    """
    return isinstance(var, (bytes, str))

def print_warning(msg, method_name=None, class_name=None, iteration=None,
                   verbose=None, maxwarns=None):
    """Poor man's maxwarns: warn only if ``iteration<=maxwarns``"""
    if verbose is None:
        verbose = global_verbosity
    if maxwarns is not None and iteration is None:
        raise ValueError('iteration must be given to activate maxwarns')
    if verbose >= -2 and (iteration is None or maxwarns is None or
                            iteration <= maxwarns):
        warnings.warn(msg + ' (' +
              ('class=%s ' % str(class_name) if class_name else '') +
              ('method=%s ' % str(method_name) if method_name else '') +
              ('iteration=%s' % str(iteration) if iteration else '') +
              ')')

def print_message(msg, method_name=None, class_name=None, iteration=None,
                   verbose=None):
    if verbose is None:
        verbose = global_verbosity
    if verbose >= 0:
        print('NOTE (module=ncopt' +
              (', class=' + str(class_name) if class_name else '') +
              (', method=' + str(method_name) if method_name else '') +
              (', iteration=' + str(iteration) if iteration is not None else '') +
              '): ', msg)

_word_pattern = re.compile(r'[A-Za-z_][A-Za-z_0-9]*')

def safe_str(s, known_words=None):
    """return ``s`` as `str` safe to `eval` or raise an exception.

    Each name in ``s`` must be a key of the `dict` `known_words` and is
    replaced by its value surrounded with a space. Besides names, only
    digits, white space and the characters ``.,+-*/()[]`` are accepted.
    The exponent marker of a number, like in ``1e-6``, is not a name.

    >>> from ncopt.utilities.utils import safe_str
    >>> safe_str('int(p)', {'int': 'int', 'p': 3.1})
    ' int ( 3.1 )'
    >>> safe_str('None', {'None': 'None', 'N': 2})
    ' None '
    >>> safe_str('N // 2 + 1e-6', {'N': 4})
    ' 4  // 2 + 1e-6'
    >>> try:
    ...     safe_str('__import__("os")', {'N': 4})
    ... except ValueError:
    ...     print('rejected')
    rejected

    """
    safe_chars = ' 0123456789.,+-*/()[]'
    if s != str(s):
        return str(s)
    if not known_words:
        known_words = {}
    # mask numbers like 1e-6 or 2.5E3 such that "e" is not seen as a name
    stest = re.sub(r'(\d\.?)[eE]([+-]?\d)', r'\1 \2', s)
    for word in _word_pattern.findall(stest):
        if word not in known_words:
            raise ValueError('"%s" is not a safe string'
                             ' (known words are %s)' % (s, str(known_words)))
    for c in _word_pattern.sub(' ', stest):
        if c not in safe_chars:
            raise ValueError('"%s" is not a safe string'
                             ' (character "%s" is not allowed)' % (s, c))
    def replace(match):
        return " %s " % known_words[match.group(0)]
    parts = re.split(r'(\d\.?[eE][+-]?\d+)', s)  # keep numbers untouched
    return ''.join(part if i % 2 else _word_pattern.sub(replace, part)
                   for i, part in enumerate(parts))

class BlancClass(object):
    """blanc container class to have a collection of attributes.

    >>> from ncopt.utilities.utils import BlancClass
    >>> p = BlancClass()
    >>> p.value1 = 0
    >>> p.value2 = 1

    """

class ElapsedWCTime(object):
    """measure elapsed wall clock time since creation or last `reset`.

    >>> import ncopt
    >>> e = ncopt.utilities.utils.ElapsedWCTime(time_offset=2)
    >>> assert 2 <= e.elapsed < 2.1
    >>> assert 0 <= e.reset(time_offset=0).elapsed < 0.1

    """
    def __init__(self, time_offset=0):
        """add time offset in seconds and start timing"""
        self.reset(time_offset)
    def reset(self, time_offset=0):
        """reset to initial state and start timing"""
        self.cum_time = time_offset
        self.start = time.time()
        return self
    @property
    def elapsed(self):
        """elapsed seconds plus time offset"""
        return self.cum_time + time.time() - self.start

def pprint(to_be_printed):
    """nicely formated print"""
    import pprint as pp
    pp.pprint(to_be_printed)
