# phanalist/grammar.py
"""
PEG grammar for the PHP subset understood by phanalist.

The grammar is written for parsimonious.  PEG has no left recursion, so
binary expressions are parsed as a flat ``operand (operator operand)*``
chain and folded into a tree with PHP's precedence table afterwards (see
:mod:`phanalist.parser`).  Postfix chains (``->``, ``?->``, ``::``, ``[]``,
calls) are likewise parsed as ``primary postfix*`` and folded left to
right.

Words in :data:`RESERVED_WORDS` can never be used as a bare name; this is
what lets statement lists stop at ``else``, ``endif``, ``case`` and
friends.  Member names after ``->`` / ``::`` and in declarations are not
restricted.
"""

from __future__ import annotations

from parsimonious.grammar import Grammar

RESERVED_WORDS = (
    "and", "as", "break", "case", "catch", "class", "clone", "const",
    "continue", "declare", "default", "do", "echo", "else", "elseif",
    "enddeclare", "endfor", "endforeach", "endif", "endswitch", "endwhile",
    "extends", "finally", "fn", "for", "foreach", "function", "global",
    "goto", "if", "implements", "include", "include_once", "instanceof",
    "insteadof", "interface", "match", "namespace", "new", "or", "print",
    "private", "protected", "public", "require", "require_once", "return",
    "switch", "throw", "trait", "try", "use", "var", "while", "xor", "yield",
)

_IDENT_START = r"A-Za-z_\x80-\uffff"
_IDENT_PART = r"A-Za-z0-9_\x80-\uffff"

_RESERVED_ALTERNATION = "|".join(sorted(RESERVED_WORDS, key=len, reverse=True))

_GRAMMAR_TEMPLATE = r'''
    # ─────────────────────────────────────────────────────────────
    # File structure
    # ─────────────────────────────────────────────────────────────

    program             = inline_html? opening_tag? _ statement_list
    statement_list      = (statement _)*

    inline_html         = ~r"(?:(?!<\?)[\s\S])+"
    opening_tag         = ~r"<\?(?:php(?![A-Za-z0-9_])|=)?"i
    closing_tag         = "?>" inline_html? opening_tag?
    terminator          = ";" / &"?>"

    # ─────────────────────────────────────────────────────────────
    # Statements
    # ─────────────────────────────────────────────────────────────

    statement           = block / closing_tag / if_statement / while_statement
                        / do_while_statement / for_statement / foreach_statement
                        / switch_statement / try_statement / return_statement
                        / echo_statement / break_statement / continue_statement
                        / global_statement / static_statement / namespace_statement
                        / use_statement / const_statement / declare_statement
                        / function_declaration / class_declaration
                        / interface_declaration / trait_declaration
                        / enum_declaration / noop_statement / expression_statement

    block               = "{" _ statement_list "}"
    noop_statement      = ";"
    expression_statement = expression _ terminator

    condition           = "(" _ expression _ ")"

    if_statement        = kw_if _ condition _ (if_colon_body / if_statement_body)
    if_statement_body   = statement else_if_clause* else_clause?
    else_if_clause      = _ kw_elseif _ condition _ statement
    else_clause         = _ kw_else _ statement
    if_colon_body       = ":" _ statement_list else_if_colon_clause* else_colon_clause? kw_endif _ terminator
    else_if_colon_clause = kw_elseif _ condition _ ":" _ statement_list
    else_colon_clause   = kw_else _ ":" _ statement_list

    while_statement     = kw_while _ condition _ (while_colon_body / statement)
    while_colon_body    = ":" _ statement_list kw_endwhile _ terminator
    do_while_statement  = kw_do _ statement _ kw_while _ condition _ terminator

    for_statement       = kw_for _ "(" _ for_expressions _ ";" _ for_expressions _ ";" _ for_expressions _ ")" _ (for_colon_body / statement)
    for_expressions     = (expression (_ "," _ expression)*)?
    for_colon_body      = ":" _ statement_list kw_endfor _ terminator

    foreach_statement   = kw_foreach _ "(" _ expression _ kw_as _ foreach_target _ ")" _ (foreach_colon_body / statement)
    foreach_target      = foreach_key? by_ref? postfix_expression
    foreach_key         = postfix_expression _ "=>" _
    foreach_colon_body  = ":" _ statement_list kw_endforeach _ terminator

    switch_statement    = kw_switch _ condition _ (switch_brace_body / switch_colon_body)
    switch_brace_body   = "{" _ (";" _)? switch_case* "}"
    switch_colon_body   = ":" _ (";" _)? switch_case* kw_endswitch _ terminator
    switch_case         = (case_label / kw_default) _ (":" / ";") _ statement_list
    case_label          = kw_case _ expression

    try_statement       = kw_try _ block catch_clause* finally_clause?
    catch_clause        = _ kw_catch _ "(" _ catch_types _ variable? _ ")" _ block
    catch_types         = name (_ "|" _ name)*
    finally_clause      = _ kw_finally _ block

    return_statement    = kw_return optional_expression _ terminator
    break_statement     = kw_break optional_expression _ terminator
    continue_statement  = kw_continue optional_expression _ terminator
    optional_expression = (_ expression)?
    echo_statement      = kw_echo _ expression_list _ terminator
    expression_list     = expression (_ "," _ expression)*
    global_statement    = kw_global _ variable (_ "," _ variable)* _ terminator
    static_statement    = kw_static _ static_variable (_ "," _ static_variable)* _ terminator
    static_variable     = variable (_ "=" _ expression)?

    namespace_statement = braced_namespace / unbraced_namespace
    braced_namespace    = kw_namespace _ (name _)? "{" _ statement_list "}"
    unbraced_namespace  = kw_namespace _ name _ terminator _ namespace_body
    namespace_body      = (!namespace_start statement _)*
    namespace_start     = kw_namespace _ (name _)? (";" / "{")

    use_statement       = kw_use _ use_kind? use_clause (_ "," _ use_clause)* _ terminator
    use_kind            = (kw_function / kw_const) _
    use_clause          = group_use / use_item
    group_use           = name "\\" "{" _ use_item (_ "," _ use_item)* _ ","? _ "}"
    use_item            = use_kind? name (_ kw_as _ member_name)?

    const_statement     = kw_const _ const_entry (_ "," _ const_entry)* _ terminator
    const_entry         = member_name _ "=" _ expression

    declare_statement   = kw_declare _ "(" _ declare_directive (_ "," _ declare_directive)* _ ")" _ (block / terminator)
    declare_directive   = member_name _ "=" _ expression

    # ─────────────────────────────────────────────────────────────
    # Declarations
    # ─────────────────────────────────────────────────────────────

    function_declaration = attributes kw_function _ by_ref? name _ parameter_list _ return_type? block

    class_declaration   = attributes class_modifiers kw_class _ name _ extends_clause? implements_clause? class_body
    class_modifiers     = (class_modifier _)*
    class_modifier      = ~r"(?:abstract|final|readonly)(?![A-Za-z0-9_])"i
    extends_clause      = kw_extends _ name _
    implements_clause   = kw_implements _ name_list _
    name_list           = name (_ "," _ name)*
    interface_declaration = attributes kw_interface _ name _ interface_extends? class_body
    interface_extends   = kw_extends _ name_list _
    trait_declaration   = attributes kw_trait _ name _ class_body
    enum_declaration    = attributes kw_enum _ name _ enum_backing? implements_clause? class_body
    enum_backing        = ":" _ type_hint _

    class_body          = "{" _ (member _)* "}"
    member              = attributes (trait_use / enum_case / class_constant / method_declaration / property_declaration)
    trait_use           = kw_use _ name_list _ (trait_adaptations / terminator)
    trait_adaptations   = ~r"\{[^}]*\}"
    enum_case           = kw_case _ member_name (_ "=" _ expression)? _ terminator
    class_constant      = member_modifiers kw_const _ constant_type? const_entry (_ "," _ const_entry)* _ terminator
    constant_type       = type_hint _ &(member_name _ "=")
    method_declaration  = member_modifiers kw_function _ by_ref? member_name _ parameter_list _ return_type? (block / terminator)
    property_declaration = property_modifiers property_type? property_entry (_ "," _ property_entry)* _ terminator
    property_type       = type_hint _
    property_entry      = variable (_ "=" _ expression)?
    member_modifiers    = (member_modifier _)*
    property_modifiers  = (member_modifier _)+
    member_modifier     = ~r"(?:(?:public|protected|private)(?:\(set\))?|static|abstract|final|readonly|var)(?![A-Za-z0-9_(])"i

    parameter_list      = "(" _ (parameter (_ "," _ parameter)* _ ","?)? _ ")"
    parameter           = attributes (parameter_modifier _)* parameter_type? by_ref? variadic? variable (_ "=" _ expression)?
    parameter_type      = type_hint _
    parameter_modifier  = ~r"(?:(?:public|protected|private)(?:\(set\))?|readonly)(?![A-Za-z0-9_(])"i
    variadic            = "..." _
    by_ref              = "&" _
    return_type         = ":" _ type_hint _

    attributes          = (attribute _)*
    attribute           = ~r"#\[(?:[^\[\]]|\[(?:[^\[\]]|\[[^\[\]]*\])*\])*\]"

    # ─────────────────────────────────────────────────────────────
    # Type hints
    # ─────────────────────────────────────────────────────────────

    type_hint           = nullable_hint / union_hint / intersection_hint / type_atom
    nullable_hint       = "?" _ type_atom
    union_hint          = type_atom (_ "|" _ type_atom)+
    intersection_hint   = type_atom (_ "&" !(_ ("$" / "...")) _ type_atom)+
    type_atom           = dnf_group / type_name
    dnf_group           = "(" _ type_hint _ ")"
    type_name           = ~r"\\?[IDENT_START][IDENT_PART]*(?:\\[IDENT_START][IDENT_PART]*)*"

    # ─────────────────────────────────────────────────────────────
    # Expressions
    # ─────────────────────────────────────────────────────────────

    expression          = ternary (_ low_logical_operator _ ternary)*
    low_logical_operator = ~r"(?:and|xor|or)(?![A-Za-z0-9_])"i

    ternary             = binary (_ ternary_tail)*
    ternary_tail        = short_ternary / full_ternary
    short_ternary       = "?:" _ binary
    full_ternary        = "?" !"?" !"->" !">" _ ternary _ ":" !":" _ binary

    binary              = unary (_ binary_operator _ unary)*
    binary_operator     = ~r"(?:\?\?(?!=)|\|\|(?!=)|&&(?!=)|===|!==|<=>|==|!=|<>|<=|>=|<<(?![=<])|>>(?!=)|\*\*(?!=)|<|>(?!=)|\|(?![|=])|\^(?!=)|&(?![&=])|\.(?![.=])|\+(?![+=])|-(?![-=>])|\*(?![*=])|/(?![/=*])|%(?!=)|instanceof(?![A-Za-z0-9_]))"i

    unary               = prefix_operation / keyword_expression / assignment / postfix_expression
    prefix_operation    = prefix_operator _ unary
    prefix_operator     = cast / "++" / "--" / "!" / "~" / "@" / "-" / "+" / kw_clone
    cast                = ~r"\(\s*(?:int|integer|bool|boolean|float|double|real|string|binary|array|object|unset)\s*\)"i

    keyword_expression  = print_expression / yield_from / yield_expression / throw_expression / include_expression
    print_expression    = kw_print _ ternary
    throw_expression    = kw_throw _ ternary
    include_expression  = kw_include _ ternary
    yield_from          = kw_yield _ kw_from _ ternary
    yield_expression    = kw_yield yield_key? yield_value?
    yield_key           = _ binary _ "=>"
    yield_value         = _ ternary

    assignment          = postfix_expression _ assignment_operator _ by_ref? ternary
    assignment_operator = ~r"(?:\*\*=|\?\?=|<<=|>>=|\.=|\+=|-=|\*=|/=|%=|&=|\|=|\^=|=(?![=>]))"

    postfix_expression  = primary postfix_operator*
    postfix_operator    = _ (member_access / nullsafe_access / static_access / index_access / arguments / postfix_increment)
    member_access       = "->" _ member_selector
    nullsafe_access     = "?->" _ member_selector
    static_access       = "::" _ static_selector
    member_selector     = member_name / variable / brace_expression
    static_selector     = variable / member_name / brace_expression
    brace_expression    = "{" _ expression _ "}"
    index_access        = "[" _ expression? _ "]"
    postfix_increment   = "++" / "--"

    arguments           = "(" _ (argument (_ "," _ argument)* _ ","?)? _ ")"
    argument            = callable_placeholder / spread_argument / named_argument / expression
    callable_placeholder = "..." _ &")"
    spread_argument     = "..." _ expression
    named_argument      = member_name _ ":" !":" _ expression

    primary             = parenthesized / closure / arrow_function / new_expression
                        / match_expression / array_literal / list_literal / heredoc
                        / string / number / variable / variable_variable / name

    parenthesized       = "(" _ expression _ ")"

    closure             = static_prefix? kw_function _ by_ref? parameter_list _ closure_uses? return_type? block
    static_prefix       = kw_static _
    closure_uses        = kw_use _ "(" _ closure_use (_ "," _ closure_use)* _ ","? _ ")" _
    closure_use         = by_ref? variable
    arrow_function      = static_prefix? kw_fn _ by_ref? parameter_list _ return_type? "=>" _ ternary

    new_expression      = kw_new _ (anonymous_class / class_reference) new_arguments?
    new_arguments       = _ arguments
    anonymous_class     = attributes kw_class _ arguments? _ extends_clause? implements_clause? class_body
    class_reference     = parenthesized / dynamic_class_reference / name
    dynamic_class_reference = variable dynamic_class_step*
    dynamic_class_step  = _ ("->" / "::") _ (variable / member_name)

    match_expression    = kw_match _ "(" _ expression _ ")" _ "{" _ (match_arm (_ "," _ match_arm)* _ ","?)? _ "}"
    match_arm           = (kw_default / expression_list) _ "=>" _ expression

    array_literal       = short_array / long_array
    short_array         = "[" _ array_items _ "]"
    long_array          = kw_array _ "(" _ array_items _ ")"
    list_literal        = kw_list _ "(" _ array_items _ ")"
    array_items         = (array_item? _ "," _)* array_item?
    array_item          = spread_item / keyed_item / value_item
    spread_item         = "..." _ expression
    keyed_item          = expression _ "=>" _ by_ref? expression
    value_item          = by_ref? expression

    string              = ~r"[bB]?'(?:[^'\\]|\\[\s\S])*'" / ~r"[bB]?\"(?:[^\"\\]|\\[\s\S])*\"" / ~r"`(?:[^`\\]|\\[\s\S])*`"
    heredoc             = ~r"[bB]?<<<[ \t]*(?:\"([A-Za-z_][A-Za-z0-9_]*)\"|'([A-Za-z_][A-Za-z0-9_]*)'|([A-Za-z_][A-Za-z0-9_]*))\r?\n(?:[\s\S]*?\r?\n)??[ \t]*(?:\1|\2|\3)(?![A-Za-z0-9_])"
    number              = ~r"(?:0[xX][0-9a-fA-F_]+|0[bB][01_]+|0[oO][0-7_]+|(?:\d[\d_]*)?\.\d[\d_]*(?:[eE][+-]?\d+)?|\d[\d_]*(?:[eE][+-]?\d+)?)"
    variable            = ~r"\$[IDENT_START][IDENT_PART]*"
    variable_variable   = "$" (variable / brace_expression)
    name                = ~r"(?!(?:RESERVED)(?![IDENT_PART]))\\?[IDENT_START][IDENT_PART]*(?:\\[IDENT_START][IDENT_PART]*)*"i
    member_name         = ~r"[IDENT_START][IDENT_PART]*"

    # ─────────────────────────────────────────────────────────────
    # Keywords
    # ─────────────────────────────────────────────────────────────

    kw_array            = ~r"array(?=\s*\()"i
    kw_as               = ~r"as(?![A-Za-z0-9_])"i
    kw_break            = ~r"break(?![A-Za-z0-9_])"i
    kw_case             = ~r"case(?![A-Za-z0-9_])"i
    kw_catch            = ~r"catch(?![A-Za-z0-9_])"i
    kw_class            = ~r"class(?![A-Za-z0-9_])"i
    kw_clone            = ~r"clone(?![A-Za-z0-9_])"i
    kw_const            = ~r"const(?![A-Za-z0-9_])"i
    kw_continue         = ~r"continue(?![A-Za-z0-9_])"i
    kw_declare          = ~r"declare(?![A-Za-z0-9_])"i
    kw_default          = ~r"default(?![A-Za-z0-9_])"i
    kw_do               = ~r"do(?![A-Za-z0-9_])"i
    kw_echo             = ~r"echo(?![A-Za-z0-9_])"i
    kw_else             = ~r"else(?![A-Za-z0-9_])"i
    kw_elseif           = ~r"elseif(?![A-Za-z0-9_])"i
    kw_endfor           = ~r"endfor(?![A-Za-z0-9_])"i
    kw_endforeach       = ~r"endforeach(?![A-Za-z0-9_])"i
    kw_endif            = ~r"endif(?![A-Za-z0-9_])"i
    kw_endswitch        = ~r"endswitch(?![A-Za-z0-9_])"i
    kw_endwhile         = ~r"endwhile(?![A-Za-z0-9_])"i
    kw_enum             = ~r"enum(?=\s+[A-Za-z_])"i
    kw_extends          = ~r"extends(?![A-Za-z0-9_])"i
    kw_finally          = ~r"finally(?![A-Za-z0-9_])"i
    kw_fn               = ~r"fn(?![A-Za-z0-9_])"i
    kw_for              = ~r"for(?![A-Za-z0-9_])"i
    kw_foreach          = ~r"foreach(?![A-Za-z0-9_])"i
    kw_from             = ~r"from(?![A-Za-z0-9_])"i
    kw_function         = ~r"function(?![A-Za-z0-9_])"i
    kw_global           = ~r"global(?![A-Za-z0-9_])"i
    kw_if               = ~r"if(?![A-Za-z0-9_])"i
    kw_implements       = ~r"implements(?![A-Za-z0-9_])"i
    kw_include          = ~r"(?:include_once|include|require_once|require)(?![A-Za-z0-9_])"i
    kw_interface        = ~r"interface(?![A-Za-z0-9_])"i
    kw_list             = ~r"list(?=\s*\()"i
    kw_match            = ~r"match(?=\s*\()"i
    kw_namespace        = ~r"namespace(?![A-Za-z0-9_])(?!\s*\\)"i
    kw_new              = ~r"new(?![A-Za-z0-9_])"i
    kw_print            = ~r"print(?![A-Za-z0-9_])"i
    kw_return           = ~r"return(?![A-Za-z0-9_])"i
    kw_static           = ~r"static(?![A-Za-z0-9_])"i
    kw_switch           = ~r"switch(?![A-Za-z0-9_])"i
    kw_throw            = ~r"throw(?![A-Za-z0-9_])"i
    kw_trait            = ~r"trait(?![A-Za-z0-9_])"i
    kw_try              = ~r"try(?![A-Za-z0-9_])"i
    kw_use              = ~r"use(?![A-Za-z0-9_])"i
    kw_while            = ~r"while(?![A-Za-z0-9_])"i
    kw_yield            = ~r"yield(?![A-Za-z0-9_])"i

    # Whitespace and comments.  ``#[`` opens an attribute, not a comment;
    # line comments end before a closing tag.
    _                   = ~r"(?:\s+|//(?:[^\n?]|\?(?!>))*|#(?!\[)(?:[^\n?]|\?(?!>))*|/\*[\s\S]*?\*/)*"
'''


def _render(template: str) -> str:
    return (
        template.replace("RESERVED", _RESERVED_ALTERNATION)
        .replace("IDENT_START", _IDENT_START)
        .replace("IDENT_PART", _IDENT_PART)
    )


PHP_GRAMMAR = Grammar(_render(_GRAMMAR_TEMPLATE))

__all__ = ["PHP_GRAMMAR", "RESERVED_WORDS"]
