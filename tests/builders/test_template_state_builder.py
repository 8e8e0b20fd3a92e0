import unittest
from io import BytesIO

import openpyxl
from openpyxl.cell.cell import MergedCell
from openpyxl.styles import Border, Font, PatternFill, Side
from openpyxl.formatting.rule import CellIsRule
from openpyxl.worksheet.cell_range import CellRange
from openpyxl.worksheet.datavalidation import DataValidation

from order_excel_generator.builders.template_state_builder import TemplateStateBuilder
from order_excel_generator.utils.sheet_grid import CellRecord, RowFormat


class TestTemplateStateBuilder(unittest.TestCase):

    def setUp(self):
        self.workbook = openpyxl.Workbook()
        self.worksheet = self.workbook.active
        self.worksheet.title = 'Pedido'

        self.worksheet['A1'] = 'Pedido: {num_pedido}'
        self.worksheet['A1'].font = Font(bold=True)
        self.worksheet.merge_cells('A1:C1')
        self.worksheet['A3'] = '{descripcion}'
        self.worksheet['B3'] = 7
        self.worksheet['C3'].fill = PatternFill(fill_type='solid', start_color='FFFF00', end_color='FFFF00')
        self.worksheet['A4'] = '=B3*2'
        self.worksheet['A5'] = 'Total'
        self.worksheet.row_dimensions[3].height = 25

    def tearDown(self):
        self.workbook.close()

    def test_capture_reads_values_styles_merges_and_row_formats(self):
        grid = TemplateStateBuilder(self.worksheet).capture()

        self.assertEqual(grid.title, 'Pedido')
        self.assertEqual(grid.bounds.coord, 'A1:C5')
        self.assertEqual(grid.get(1, 1).value, 'Pedido: {num_pedido}')
        self.assertTrue(grid.get(1, 1).is_text)
        self.assertEqual(grid.get(3, 2).value, 7)
        self.assertEqual(grid.get(4, 1).data_type, 'f')
        self.assertIsNone(grid.get(3, 3).value)
        self.assertEqual(grid.get(3, 3).style_ref, self.worksheet['C3']._style)
        self.assertIsNone(grid.get(2, 1), "Empty unstyled cells are not recorded")
        self.assertEqual([m.coord for m in grid.merged_ranges], ['A1:C1'])
        self.assertEqual(grid.row_formats, {3: RowFormat(height=25)})

    def test_restore_writes_a_mutated_grid(self):
        builder = TemplateStateBuilder(self.worksheet)
        grid = builder.capture()

        grid.grow_rows(1)
        grid.set(6, 1, grid.pop(5, 1))
        grid.get(1, 1).set_text('Pedido: P-100')
        grid.set(2, 2, CellRecord('=not a formula', 's'))
        grid.row_formats[4] = grid.row_formats.pop(3)
        builder.restore(grid)

        buffer = BytesIO()
        self.workbook.save(buffer)
        reloaded = openpyxl.load_workbook(BytesIO(buffer.getvalue()))
        ws = reloaded['Pedido']

        self.assertEqual(ws['A1'].value, 'Pedido: P-100')
        self.assertTrue(ws['A1'].font.bold)
        self.assertIsInstance(ws['B1'], MergedCell)
        self.assertIsNone(ws['A5'].value)
        self.assertEqual(ws['A6'].value, 'Total')
        self.assertEqual(ws['B2'].value, '=not a formula')
        self.assertEqual(ws['B2'].data_type, 's')
        self.assertEqual(ws['A4'].value, '=B3*2')
        self.assertEqual(ws['C3'].fill.fgColor.rgb, '00FFFF00')
        self.assertEqual(ws.row_dimensions[4].height, 25)
        self.assertIsNone(ws.row_dimensions[3].height)
        self.assertEqual(ws.max_row, 6)
        reloaded.close()

    def test_restore_styles_cells_covered_by_merges(self):
        thin = Side(border_style='thin', color='000000')
        self.worksheet['C1'].border = Border(bottom=thin)
        builder = TemplateStateBuilder(self.worksheet)
        grid = builder.capture()
        self.assertIsNotNone(grid.get(1, 3))

        grid.merged_ranges = [CellRange('A1:C1')]
        builder.restore(grid)

        self.assertIsInstance(self.worksheet['C1'], MergedCell)
        self.assertEqual(self.worksheet['C1'].border.bottom.style, 'thin')

    def test_row_formats_move_with_their_rows(self):
        self.worksheet.row_dimensions[5].hidden = True
        self.worksheet.row_dimensions[5].outlineLevel = 1
        builder = TemplateStateBuilder(self.worksheet)
        grid = builder.capture()
        self.assertEqual(grid.row_formats[5], RowFormat(hidden=True, outline_level=1))

        grid.grow_rows(1)
        grid.set(6, 1, grid.pop(5, 1))
        grid.row_formats[6] = grid.row_formats.pop(5)
        builder.restore(grid)

        self.assertTrue(self.worksheet.row_dimensions[6].hidden)
        self.assertEqual(self.worksheet.row_dimensions[6].outlineLevel, 1)
        self.assertFalse(self.worksheet.row_dimensions[5].hidden)
        self.assertEqual(self.worksheet.row_dimensions[5].outlineLevel, 0)

    def test_rule_ranges_are_captured_and_restored(self):
        rule = CellIsRule(operator='greaterThan', formula=['0'], font=Font(color='FF0000'))
        self.worksheet.conditional_formatting.add('B5', rule)
        validation = DataValidation(type='list', formula1='"SI,NO"')
        validation.add('C3')
        self.worksheet.add_data_validation(validation)
        builder = TemplateStateBuilder(self.worksheet)
        grid = builder.capture()

        self.assertEqual([[r.coord for r in cf.ranges] for cf in grid.conditional_formats], [['B5']])
        self.assertEqual([[r.coord for r in dv.ranges] for dv in grid.data_validations], [['C3']])

        grid.conditional_formats[0].ranges[0].shift(row_shift=1)
        grid.data_validations[0].ranges[0].expand(down=2)
        builder.restore(grid)

        buffer = BytesIO()
        self.workbook.save(buffer)
        ws = openpyxl.load_workbook(BytesIO(buffer.getvalue()))['Pedido']
        self.assertEqual([str(cf.sqref) for cf in ws.conditional_formatting], ['B6'])
        self.assertEqual([str(dv.sqref) for dv in ws.data_validations.dataValidation], ['C3:C5'])


if __name__ == '__main__':
    unittest.main()
