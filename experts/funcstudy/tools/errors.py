"""Error taxonomy for the function-study engine.

Every error is recoverable and surfaced to the caller; the tool layer maps
them to error dictionaries with a status code.
"""


class StudyError(Exception):
    code = "study_error"
    status = 400

    def __init__(self, message, code=None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class InvalidExpression(StudyError):
    code = "invalid_expression"


class InvalidCharacter(InvalidExpression):
    code = "invalid_character"


class InvalidVariableName(InvalidExpression):
    code = "invalid_variable_name"


class InvalidVariableValue(InvalidExpression):
    code = "invalid_variable_value"


class InvalidNumber(InvalidExpression):
    code = "invalid_number"


class EvaluationFailure(StudyError):
    code = "evaluation_failure"


class UnsolvableCondition(StudyError):
    code = "unsolvable_condition"


class DivisionByZero(StudyError):
    code = "division_by_zero"
