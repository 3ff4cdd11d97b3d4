import asyncio

import DirectCompiler
from InterfaceComponents.ASTTree import ASTTree
from InterfaceComponents.DiagnosticTable import DiagnosticTable
from InterfaceComponents.InspectorApp import CODE_GENERATION, DONE, SemanticInspector
from InterfaceComponents.ProductCodeDisplay import ProductCodeEditor
from InterfaceComponents.SymbolTable import SymbolTableWidget


def test_cli_exit_codes(programs_dir, tmp_path):
    assert DirectCompiler.main([str(programs_dir / "example.json"), "-o", str(tmp_path), "-q"]) == 0
    assert (tmp_path / "example.txt").exists()
    assert DirectCompiler.main([str(programs_dir / "errors.json"), "-o", str(tmp_path), "-q"]) == 1
    assert DirectCompiler.main([str(tmp_path / "missing.json"), "-o", str(tmp_path)]) == 2


def test_inspector_steps_through_a_program(programs_dir):
    async def run():
        app = SemanticInspector(programs_dir / "errors.json")
        async with app.run_test() as pilot:
            await pilot.pause()
            app.action_manual_tick()
            assert app.query_one(DiagnosticTable).row_count == 0
            app.action_manual_tick()
            assert app.query_one(DiagnosticTable).row_count == 1

            app.action_complete_step()
            await pilot.pause()
            assert app.current_phase == CODE_GENERATION
            assert app.query_one(DiagnosticTable).row_count == 8
            assert app.query_one(SymbolTableWidget).row_count == len(app.pipeline.symbols.symbols)
            assert app.query_one(ASTTree).root.children

            app.action_complete_step()
            await pilot.pause()
            assert app.current_phase == DONE
            assert app.query_one(ProductCodeEditor).text == app.pipeline.output_code

    asyncio.run(run())


def test_inspector_reports_missing_program(tmp_path):
    async def run():
        app = SemanticInspector(tmp_path / "missing.json")
        async with app.run_test() as pilot:
            await pilot.pause()
            assert app.current_phase == ""

    asyncio.run(run())
