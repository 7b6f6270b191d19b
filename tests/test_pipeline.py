import pytest

from optdiff import (
    FULL_MODULE_KEY,
    Pass,
    PassDumpParser,
    PassMismatchError,
    PipelineOptions,
    process,
)


INLINER_DUMP = """\
clang version 18.1.0
Target: x86_64-unknown-linux-gnu
*** IR Dump Before Inliner ***
define i32 @f(i32 %x) {
  %y = add i32 %x, 1
  ret i32 %y
}
*** IR Dump After Inliner ***
define i32 @f(i32 %x) {
  %y = add i32 %x, 2
  ret i32 %y
}
"""


def test_process_end_to_end():
    result = process(INLINER_DUMP)

    assert result.prefix == "clang version 18.1.0\nTarget: x86_64-unknown-linux-gnu\n"
    assert result.passes == {
        "f": [
            Pass(
                name="Inliner",
                is_machine_level=False,
                before="define i32 @f(i32 %x) {\n  %y = add i32 %x, 1\n  ret i32 %y\n}",
                after="define i32 @f(i32 %x) {\n  %y = add i32 %x, 2\n  ret i32 %y\n}",
                ir_changed=True,
            )
        ]
    }
    assert result.functions() == ["f"]


def test_transcript_without_headers_is_all_prefix():
    text = "warning: nothing to see here\nsecond line"

    result = process(text)

    assert result.prefix == text
    assert result.passes == {}


def test_interleaved_dumps_report_mismatch():
    dump = (
        "*** IR Dump Before Foo ***\n"
        "define void @f() {\n}\n"
        "*** IR Dump After Bar ***\n"
        "define void @f() {\n}\n"
    )

    with pytest.raises(PassMismatchError) as excinfo:
        process(dump)

    assert (excinfo.value.before_name, excinfo.value.after_name) == ("Foo", "Bar")


def test_blank_runs_are_collapsed_in_pass_text():
    dump = (
        "*** IR Dump Before Foo ***\n"
        "define void @f() {\n"
        "entry:\n"
        "\n"
        "\n"
        "\n"
        "  ret void\n"
        "}\n"
        "*** IR Dump After Foo ***\n"
        "define void @f() {\n"
        "entry:\n"
        "  ret void\n"
        "}\n"
    )

    passes = process(dump).passes["f"]

    assert passes[0].before == "define void @f() {\nentry:\n\n  ret void\n}"
    assert passes[0].ir_changed


def test_filters_can_be_disabled():
    dump = (
        "*** IR Dump Before Foo ***\n"
        "define void @f() {\n"
        "  ret void, !dbg !9\n"
        "}\n"
        "*** IR Dump After Foo ***\n"
        "define void @f() {\n"
        "  ret void, !dbg !10\n"
        "}\n"
    )

    filtered = process(dump).passes["f"][0]
    raw = process(dump, apply_filters=False).passes["f"][0]

    assert not filtered.ir_changed
    assert "!dbg !9" in raw.before
    assert raw.ir_changed


MACHINE_DUMP = """\
*** IR Dump Before CodeGenPrepare ***
define void @f() {
  ret void
}
*** IR Dump After CodeGenPrepare ***
define void @f() {
  ret void
}
# *** IR Dump Before Finalize ISel and expand pseudo-instructions ***:
# Machine code for function f: IsSSA, TracksLiveness

bb.0 (%ir-block.0):
  RET64
# End machine code for function f.

# *** IR Dump After Finalize ISel and expand pseudo-instructions ***:
# Machine code for function f: IsSSA, TracksLiveness, NoPHIs

bb.0 (%ir-block.0):
  RET64
# End machine code for function f.
"""


def test_machine_passes_are_stitched_to_ir():
    passes = process(MACHINE_DUMP).passes["f"]

    assert [p.name for p in passes] == [
        "CodeGenPrepare",
        "Finalize ISel and expand pseudo-instructions",
    ]
    assert not passes[0].ir_changed
    assert passes[1].is_machine_level
    assert passes[1].before == passes[0].after
    assert passes[1].after.startswith("# Machine code for function f: IsSSA, TracksLiveness, NoPHIs")
    assert passes[1].ir_changed


def test_machine_passes_can_be_excluded():
    parser = PassDumpParser(PipelineOptions(stop_at_machine_code=True))

    passes = parser.process(MACHINE_DUMP).passes["f"]

    assert [p.name for p in passes] == ["CodeGenPrepare"]


FULL_MODULE_DUMP = """\
*** IR Dump Before InstCombinePass *** (function: bar)
define void @bar() {
  ret void
}
*** IR Dump After InstCombinePass *** (function: bar)
define void @bar() {
  ret void
}
*** IR Dump Before LoopRotatePass *** (loop: %loop1)
; Preheader:
entry:
*** IR Dump After LoopRotatePass *** (loop: %loop1)
; Preheader:
entry.new:
"""


def test_full_module_mode_attributes_loop_dumps():
    result = process(FULL_MODULE_DUMP, full_module=True)

    assert set(result.passes) == {FULL_MODULE_KEY, "bar"}
    assert result.passes[FULL_MODULE_KEY] == []
    bar = result.passes["bar"]
    assert [p.name for p in bar] == ["InstCombinePass (bar)", "LoopRotatePass (bar)"]
    assert not bar[0].ir_changed
    assert bar[1].before == "; Preheader:\nentry:\n"
    assert bar[1].after == "; Preheader:\nentry.new:\n"


def test_options_are_independent():
    options = PipelineOptions(filter_debug_info=False, full_module=True)

    assert options.filter_options.filter_ir_metadata
    assert not options.filter_options.filter_debug_info
    assert options.apply_filters
