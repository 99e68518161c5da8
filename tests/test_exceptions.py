import pytest

from nal_syntax.string_utils import wrap_paragraphs

from nal_syntax.tables import ErrorKinds, ParameterSetKinds

from nal_syntax.registry import ANY_ID, ParameterSetKey

from nal_syntax.exceptions import (
    ParseError,
    InsufficientData,
    MalformedCode,
    UnresolvedReference,
)


@pytest.mark.parametrize(
    "exception,error_kind,summary",
    [
        (
            InsufficientData(8, 3),
            ErrorKinds.insufficient_data,
            "Unexpectedly reached the end of the data (8 bits requested, 3 remaining).",
        ),
        (
            InsufficientData(1, 0),
            ErrorKinds.insufficient_data,
            "Unexpectedly reached the end of the data (1 bit requested, 0 remaining).",
        ),
        (
            MalformedCode("cpb_cnt_minus1", 40, "must be at most 31"),
            ErrorKinds.malformed_code,
            "Malformed cpb_cnt_minus1 (40): must be at most 31.",
        ),
        (
            MalformedCode("exp-Golomb code", None, "prefix of more than 32 zero bits"),
            ErrorKinds.malformed_code,
            "Malformed exp-Golomb code: prefix of more than 32 zero bits.",
        ),
        (
            UnresolvedReference(
                [ParameterSetKey(ParameterSetKinds.sequence_parameter_set, 2)]
            ),
            ErrorKinds.unresolved_reference,
            "Referenced parameter set never became available: "
            "sequence_parameter_set[2].",
        ),
        (
            UnresolvedReference(
                [
                    ParameterSetKey(ParameterSetKinds.video_parameter_set, 0),
                    ParameterSetKey(ParameterSetKinds.sequence_parameter_set, ANY_ID),
                ]
            ),
            ErrorKinds.unresolved_reference,
            "Referenced parameter sets never became available: "
            "video_parameter_set[0], sequence_parameter_set[*].",
        ),
    ],
)
def test_summary(exception, error_kind, summary):
    assert isinstance(exception, ParseError)
    assert exception.error_kind == error_kind
    assert exception.offset is None
    assert str(exception) == summary

    # The explanation has further paragraphs
    assert len(wrap_paragraphs(exception.explain()).split("\n\n")) == 2
