from optdiff.model import LOOP_KEY, RawDumpSegment
from optdiff.segmenter import split_functions, split_raw_segments


TRANSCRIPT = """\
*** IR Dump Before Foo ***


define void @f() {
  ret void


}
*** IR Dump After Foo *** (function: f)
define void @f() {
  ret void
}
"""


def test_split_raw_segments_collapses_blank_lines():
    segments = split_raw_segments(TRANSCRIPT)

    assert [segment.header for segment in segments] == [
        "IR Dump Before Foo",
        "IR Dump After Foo",
    ]
    assert segments[0].body == "define void @f() {\n  ret void\n\n}\n"
    assert segments[1].body == "define void @f() {\n  ret void\n}\n"
    assert segments[1].affected_function == "f"
    assert not segments[0].is_machine_level


def test_split_raw_segments_ignores_text_before_first_header():
    segments = split_raw_segments("banner line\n\n" + TRANSCRIPT)

    assert len(segments) == 2
    assert "banner" not in segments[0].body


def test_split_raw_segments_without_headers_is_empty():
    assert split_raw_segments("") == []
    assert split_raw_segments("clang version 18.1.0\nTarget: x86_64\n") == []


MIXED = """\
*** IR Dump After CodeGenPrepare ***
define void @f() {
  ret void
}
# *** IR Dump Before Finalize ISel ***:
# Machine code for function f: IsSSA
bb.0:
  RET64
# End machine code for function f.
# *** IR Dump After Finalize ISel ***:
# Machine code for function f: IsSSA
bb.0:
  RET64
# End machine code for function f.
"""


def test_machine_segments_are_kept_by_default():
    segments = split_raw_segments(MIXED)

    assert [segment.is_machine_level for segment in segments] == [False, True, True]


def test_stop_at_machine_code_ends_segmentation():
    segments = split_raw_segments(MIXED, stop_at_machine_code=True)

    assert [segment.header for segment in segments] == ["IR Dump After CodeGenPrepare"]
    assert segments[0].body.endswith("}\n")


def _segment(body: str, machine: bool = False) -> RawDumpSegment:
    return RawDumpSegment(header="IR Dump After Foo", is_machine_level=machine, body=body)


def test_split_functions_collects_ir_functions_in_order():
    body = (
        "@g = global i32 0\n"
        "define void @b() {\n"
        "  ret void\n"
        "}\n"
        "\n"
        "define void @a() {\n"
        "entry:\n"
        "  ret void\n"
        "}\n"
    )

    split = split_functions(_segment(body))

    assert list(split.functions) == ["b", "a"]
    assert split.functions["b"] == ["define void @b() {", "  ret void", "}"]
    assert split.functions["a"][1] == "entry:"
    assert split.header == "IR Dump After Foo"


def test_split_functions_handles_machine_functions():
    body = (
        "# Machine code for function main: IsSSA, TracksLiveness\n"
        "bb.0.entry:\n"
        "  RET64 $eax\n"
        "# End machine code for function main.\n"
        "\n"
    )

    split = split_functions(_segment(body, machine=True))

    assert split.is_machine_level
    assert split.functions == {
        "main": [
            "# Machine code for function main: IsSSA, TracksLiveness",
            "bb.0.entry:",
            "  RET64 $eax",
            "# End machine code for function main.",
        ]
    }


def test_split_functions_opens_loop_pseudo_function():
    body = "; Preheader:\nentry:\n  br label %loop\n\n; Loop:\nloop:\n  br label %loop\n"

    split = split_functions(_segment(body))

    assert list(split.functions) == [LOOP_KEY]
    assert split.functions[LOOP_KEY][0] == "; Preheader:"
    assert split.functions[LOOP_KEY][-1] == "  br label %loop"


def test_split_functions_keeps_unterminated_function():
    split = split_functions(_segment("define void @f() {\n  ret void\n"))

    assert split.functions == {"f": ["define void @f() {", "  ret void"]}


def test_new_define_closes_open_function():
    split = split_functions(_segment("define void @f() {\n  ret void\ndefine void @g() {\n}\n"))

    assert split.functions["f"] == ["define void @f() {", "  ret void"]
    assert split.functions["g"] == ["define void @g() {", "}"]
