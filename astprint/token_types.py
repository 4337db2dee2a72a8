"""
Token kinds of the syntax tree.

The names follow checkstyle's TokenTypes so canonical token strings look the
same as those produced by checkstyle-based tooling.
"""

# Structure
COMPILATION_UNIT = "COMPILATION_UNIT"
PACKAGE_DEF = "PACKAGE_DEF"
IMPORT = "IMPORT"
STATIC_IMPORT = "STATIC_IMPORT"
CLASS_DEF = "CLASS_DEF"
INTERFACE_DEF = "INTERFACE_DEF"
ENUM_DEF = "ENUM_DEF"
RECORD_DEF = "RECORD_DEF"
ANNOTATION_DEF = "ANNOTATION_DEF"
ENUM_CONSTANT_DEF = "ENUM_CONSTANT_DEF"
OBJBLOCK = "OBJBLOCK"
METHOD_DEF = "METHOD_DEF"
CTOR_DEF = "CTOR_DEF"
STATIC_INIT = "STATIC_INIT"
INSTANCE_INIT = "INSTANCE_INIT"
VARIABLE_DEF = "VARIABLE_DEF"
PARAMETERS = "PARAMETERS"
PARAMETER_DEF = "PARAMETER_DEF"
MODIFIERS = "MODIFIERS"
ANNOTATION = "ANNOTATION"
TYPE = "TYPE"
TYPE_ARGUMENTS = "TYPE_ARGUMENTS"
TYPE_ARGUMENT = "TYPE_ARGUMENT"
TYPE_PARAMETERS = "TYPE_PARAMETERS"
WILDCARD_TYPE = "WILDCARD_TYPE"
ARRAY_DECLARATOR = "ARRAY_DECLARATOR"
EXTENDS_CLAUSE = "EXTENDS_CLAUSE"
IMPLEMENTS_CLAUSE = "IMPLEMENTS_CLAUSE"
SLIST = "SLIST"
EXPR = "EXPR"
ELIST = "ELIST"
METHOD_CALL = "METHOD_CALL"
INDEX_OP = "INDEX_OP"
TYPECAST = "TYPECAST"
ARRAY_INIT = "ARRAY_INIT"
LAMBDA = "LAMBDA"
METHOD_REF = "METHOD_REF"
FOR_INIT = "FOR_INIT"
FOR_CONDITION = "FOR_CONDITION"
FOR_ITERATOR = "FOR_ITERATOR"
FOR_EACH_CLAUSE = "FOR_EACH_CLAUSE"
CASE_GROUP = "CASE_GROUP"
LITERAL_CASE = "LITERAL_CASE"
LITERAL_DEFAULT = "LITERAL_DEFAULT"
LITERAL_CATCH = "LITERAL_CATCH"
LITERAL_FINALLY = "LITERAL_FINALLY"
LITERAL_ELSE = "LITERAL_ELSE"
LITERAL_STATIC = "LITERAL_STATIC"
LITERAL_NEW = "LITERAL_NEW"

# Leaves
IDENT = "IDENT"
NUM_INT = "NUM_INT"
NUM_LONG = "NUM_LONG"
NUM_FLOAT = "NUM_FLOAT"
NUM_DOUBLE = "NUM_DOUBLE"
STRING_LITERAL = "STRING_LITERAL"
CHAR_LITERAL = "CHAR_LITERAL"
TEXT_BLOCK = "TEXT_BLOCK_LITERAL_BEGIN"
LITERAL_TRUE = "LITERAL_TRUE"
LITERAL_FALSE = "LITERAL_FALSE"
LITERAL_NULL = "LITERAL_NULL"
LITERAL_THIS = "LITERAL_THIS"
LITERAL_SUPER = "LITERAL_SUPER"

# Punctuation
SEMI = "SEMI"
COMMA = "COMMA"
DOT = "DOT"
LPAREN = "LPAREN"
RPAREN = "RPAREN"
LCURLY = "LCURLY"
RCURLY = "RCURLY"
LBRACK = "LBRACK"
RBRACK = "RBRACK"
GENERIC_START = "GENERIC_START"
GENERIC_END = "GENERIC_END"
ASSIGN = "ASSIGN"
COLON = "COLON"
QUESTION = "QUESTION"
AT = "AT"
ELLIPSIS = "ELLIPSIS"

TYPE_DECLARATIONS = frozenset({
    CLASS_DEF, INTERFACE_DEF, ENUM_DEF, RECORD_DEF, ANNOTATION_DEF,
})

METHOD_DECLARATIONS = frozenset({METHOD_DEF, CTOR_DEF})

LITERALS = frozenset({
    NUM_INT, NUM_LONG, NUM_FLOAT, NUM_DOUBLE, STRING_LITERAL, CHAR_LITERAL,
    TEXT_BLOCK, LITERAL_TRUE, LITERAL_FALSE, LITERAL_NULL,
})
