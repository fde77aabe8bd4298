"""Terminal capability names, in the order of the compiled terminfo string table."""

#: Short names of the standard string capabilities, by position in the
#: compiled string offset table (``term.h`` order, shared by every terminfo
#: compiler since SVr4).  Entries past the end of this tuple are not named and
#: cannot be looked up.
STRING_CAPABILITIES = (
    'cbt', 'bel', 'cr', 'csr', 'tbc', 'clear', 'el', 'ed', 'hpa', 'cmdch',
    'cup', 'cud1', 'home', 'civis', 'cub1', 'mrcup', 'cnorm', 'cuf1', 'll',
    'cuu1', 'cvvis', 'dch1', 'dl1', 'dsl', 'hd', 'smacs', 'blink', 'bold',
    'smcup', 'smdc', 'dim', 'smir', 'invis', 'prot', 'rev', 'smso', 'smul',
    'ech', 'rmacs', 'sgr0', 'rmcup', 'rmdc', 'rmir', 'rmso', 'rmul', 'flash',
    'ff', 'fsl', 'is1', 'is2', 'is3', 'if', 'ich1', 'il1', 'ip', 'kbs',
    'ktbc', 'kclr', 'kctab', 'kdch1', 'kdl1', 'kcud1', 'krmir', 'kel', 'ked',
    'kf0', 'kf1', 'kf10', 'kf2', 'kf3', 'kf4', 'kf5', 'kf6', 'kf7', 'kf8',
    'kf9', 'khome', 'kich1', 'kil1', 'kcub1', 'kll', 'knp', 'kpp', 'kcuf1',
    'kind', 'kri', 'khts', 'kcuu1', 'rmkx', 'smkx', 'lf0', 'lf1', 'lf10',
    'lf2', 'lf3', 'lf4', 'lf5', 'lf6', 'lf7', 'lf8', 'lf9', 'rmm', 'smm',
    'nel', 'pad', 'dch', 'dl', 'cud', 'ich', 'indn', 'il', 'cub', 'cuf',
    'rin', 'cuu', 'pfkey', 'pfloc', 'pfx', 'mc0', 'mc4', 'mc5', 'rep', 'rs1',
    'rs2', 'rs3', 'rf', 'rc', 'vpa', 'sc', 'ind', 'ri', 'sgr', 'hts', 'wind',
    'ht', 'tsl', 'uc', 'hu', 'iprog', 'ka1', 'ka3', 'kb2', 'kc1', 'kc3',
    'mc5p', 'rmp', 'acsc', 'pln', 'kcbt', 'smxon', 'rmxon', 'smam', 'rmam',
    'xonc', 'xoffc', 'enacs', 'smln', 'rmln',
)

#: Sugary names for the capabilities used by :class:`~.Renderer`.
CAPABILITY_ALIASES = {
    'enter_fullscreen': 'smcup',
    'exit_fullscreen': 'rmcup',
    'move': 'cup',
    'hide_cursor': 'civis',
    'normal_cursor': 'cnorm',
}

__all__ = ('STRING_CAPABILITIES', 'CAPABILITY_ALIASES',)
