'''
Tests for the in-memory host.

'''

import unittest

import anchorscad_lib.linear as l
from anchorscad_lib.test_tools import iterable_assert

from typolayer import host
from typolayer.constants import (
    AnchorPoint,
    ContentType,
    CoordinateSpace,
    HostRejection,
    Justification,
    Leading,
    StaleReference,
    TargetKind,
)
from typolayer.memhost import MemHost, MemTextFrame


class MemStoryTest(unittest.TestCase):

    def setUp(self):
        self.host = MemHost()
        self.doc = self.host.document

    def testSpans(self):
        story = self.doc.add_story('ab cd\nef')
        self.assertEqual(story.spans('paragraph'), [(0, 5), (6, 8)])
        self.assertEqual(story.spans('word'), [(0, 2), (3, 5), (6, 8)])
        self.assertEqual(len(story.spans('character')), 7)
        self.assertEqual(story.spans('text'), [(0, 8)])
        self.assertRaises(ValueError, story.spans, 'line')

    def testLineEndingsNormalised(self):
        story = self.doc.add_story('a\r\nb\rc')
        self.assertEqual(story.contents, 'a\nb\nc')
        self.assertEqual([p.contents for p in story.paragraphs()], ['a', 'b', 'c'])

    def testEmptyStory(self):
        story = self.doc.add_story()
        paras = story.paragraphs()
        self.assertEqual(len(paras), 1)
        self.assertEqual(paras[0].contents, '')
        self.assertEqual(paras[0].get_property(host.POINT_SIZE), 12.0)
        paras[0].set_property(host.POINT_SIZE, 9)
        self.assertEqual(paras[0].get_property(host.POINT_SIZE), 9)
        self.assertEqual(story.characters(), [])

    def testDefaults(self):
        story = self.doc.add_story('x')
        para = story.paragraphs()[0]
        self.assertEqual(para.get_property(host.FILL_COLOR), 'Black')
        self.assertEqual(para.get_property(host.JUSTIFICATION), Justification.LEFT_ALIGN)
        self.assertEqual(para.get_property(host.LEADING), Leading.AUTO)
        self.assertEqual(para.get_property(host.APPLIED_FONT).family, 'Minion Pro')
        self.assertEqual(para.get_property(host.APPLIED_PARAGRAPH_STYLE).name, '[Basic Paragraph]')

    def testWordFormatting(self):
        story = self.doc.add_story('big small')
        big, small = story.words()
        small.set_property(host.POINT_SIZE, 6)
        self.assertEqual(small.get_property(host.POINT_SIZE), 6)
        self.assertEqual(big.get_property(host.POINT_SIZE), 12.0)
        # A paragraph reads the formatting of its first character.
        self.assertEqual(story.paragraphs()[0].get_property(host.POINT_SIZE), 12.0)
        self.assertEqual([c.get_property(host.POINT_SIZE) for c in small.characters()], [6] * 5)

    def testParagraphLevelProperty(self):
        story = self.doc.add_story('ab\ncd')
        story.characters()[3].set_property(host.JUSTIFICATION, Justification.RIGHT_ALIGN)
        self.assertEqual(
            [p.get_property(host.JUSTIFICATION) for p in story.paragraphs()],
            [Justification.LEFT_ALIGN, Justification.RIGHT_ALIGN])

    def testStaleAfterSetContents(self):
        story = self.doc.add_story('one')
        para = story.paragraphs()[0]
        self.assertTrue(para.is_valid())
        story.set_contents('two')
        self.assertFalse(para.is_valid())
        self.assertRaises(StaleReference, para.get_property, host.POINT_SIZE)
        self.assertRaises(StaleReference, lambda: para.contents)

    def testRejectedValues(self):
        para = self.doc.add_story('x').paragraphs()[0]
        self.assertRaises(HostRejection, para.set_property, host.POINT_SIZE, 0)
        self.assertRaises(HostRejection, para.set_property, host.POINT_SIZE, True)
        self.assertRaises(HostRejection, para.set_property, host.LEADING, 'tight')
        self.assertRaises(HostRejection, para.set_property, host.JUSTIFICATION, 'left')
        self.assertRaises(HostRejection, para.set_property, host.FILL_COLOR, 3)
        self.assertRaises(HostRejection, para.set_property, host.TRACKING, None)
        self.assertRaises(HostRejection, para.get_property, 'colour')
        missing = self.host.find_font('Comic Sans', 'Regular')
        self.assertRaises(HostRejection, para.set_property, host.APPLIED_FONT, missing)


class MemTextFrameTest(unittest.TestCase):

    def setUp(self):
        self.host = MemHost()
        self.frame = self.host.add_text_frame(self.host.page, self.host.layer)

    def testOverset(self):
        self.frame.geometric_bounds = (0, 0, 20, 100)
        self.frame.set_contents('a\nb')
        self.assertEqual(len(self.frame.paragraphs()), 1)
        self.assertTrue(self.frame.overflows())
        self.assertEqual(len(self.frame.story.paragraphs()), 2)

        self.frame.geometric_bounds = (0, 0, 40, 100)
        self.assertEqual(len(self.frame.paragraphs()), 2)
        self.assertFalse(self.frame.overflows())

    def testFixedLeading(self):
        self.frame.geometric_bounds = (0, 0, 20, 100)
        self.frame.set_contents('a\nb')
        for para in reversed(self.frame.story.paragraphs()):
            para.set_property(host.LEADING, 10)
        self.assertEqual(len(self.frame.paragraphs()), 2)

    def testRangeLeavesFrame(self):
        self.frame.geometric_bounds = (0, 0, 30, 100)
        self.frame.set_contents('a\nb')
        first, second = self.frame.paragraphs()
        first.set_property(host.POINT_SIZE, 20)
        self.assertTrue(first.is_valid())
        self.assertFalse(second.is_valid())
        self.assertRaises(StaleReference, second.set_property, host.POINT_SIZE, 20)

    def testScaleAboutCenter(self):
        self.frame.geometric_bounds = (0, 0, 10, 20)
        self.frame.transform(
            CoordinateSpace.PASTEBOARD_COORDINATES, AnchorPoint.CENTER_ANCHOR, l.scale([2, 2, 1]))
        iterable_assert(self.assertAlmostEqual, self.frame.geometric_bounds, (-5, -10, 15, 30))

    def testTranslateAboutTopLeft(self):
        self.frame.geometric_bounds = (10, 10, 20, 20)
        self.frame.transform(
            CoordinateSpace.PASTEBOARD_COORDINATES,
            AnchorPoint.TOP_LEFT_ANCHOR,
            l.translate([5, -5, 0]))
        iterable_assert(self.assertAlmostEqual, self.frame.geometric_bounds, (5, 15, 15, 25))

    def testTransformRejections(self):
        self.assertRaises(
            HostRejection, self.frame.transform, 'inner', AnchorPoint.CENTER_ANCHOR, l.IDENTITY)
        self.assertRaises(
            HostRejection, self.frame.transform,
            CoordinateSpace.PASTEBOARD_COORDINATES, 'bottom', l.IDENTITY)

    def testBadBounds(self):
        with self.assertRaises(HostRejection):
            self.frame.geometric_bounds = (0, 0, 10)
        with self.assertRaises(HostRejection):
            self.frame.geometric_bounds = (0, 0, 10, 'x')

    def testRemove(self):
        para = self.frame.story.paragraphs()[0]
        self.frame.remove()
        self.assertFalse(self.frame.is_valid())
        self.assertFalse(self.frame.story.is_valid())
        self.assertFalse(para.is_valid())
        self.assertEqual(self.host.page.text_frames(), [])


class MemDocumentTest(unittest.TestCase):

    def testSpreads(self):
        doc = MemHost(page_count=4).document
        self.assertEqual([len(s.pages) for s in doc.spreads], [1, 2, 1])
        self.assertEqual([p.name for p in doc.pages], ['1', '2', '3', '4'])
        self.assertIs(doc.pages[2].spread, doc.spreads[1])

    def testStyles(self):
        doc = MemHost().document
        self.assertEqual(doc.find_character_style('[None]').kind, TargetKind.CHARACTER_STYLE)
        style = doc.add_paragraph_style('Body')
        self.assertEqual(style.kind, TargetKind.PARAGRAPH_STYLE)
        self.assertIs(doc.find_paragraph_style('Body'), style)
        self.assertRaises(HostRejection, doc.add_paragraph_style, 'Body')
        # Character and paragraph styles have separate names.
        doc.add_character_style('Body')

        style.remove()
        self.assertIsNone(doc.find_paragraph_style('Body'))

    def testStyleProperties(self):
        doc = MemHost().document
        style = doc.add_character_style('Loud')
        self.assertRaises(HostRejection, style.set_properties, {'point_size': 10, 'bogus': 1})
        self.assertEqual(style.properties, {})
        self.assertRaises(HostRejection, style.set_properties, [('point_size', 10)])
        style.set_properties({'point_size': 10, 'name': 'Louder'})
        self.assertEqual(style.properties, {'point_size': 10})
        self.assertEqual(style.name, 'Louder')

    def testLayers(self):
        mem = MemHost()
        doc = mem.document
        top = doc.add_layer('Top')
        a = mem.add_text_frame(mem.page, doc.layers[0])
        b = mem.add_text_frame(mem.page, top)
        self.assertEqual(doc.layers[0].text_frames(), [a])
        self.assertEqual(top.text_frames(), [b])
        self.assertEqual(doc.text_frames(), [a, b])


class MemShapeTest(unittest.TestCase):

    def setUp(self):
        self.host = MemHost()

    def testConvertToTextFrame(self):
        before = self.host.add_shape((0, 0, 5, 5))
        rect = self.host.add_shape((0, 0, 50, 60))
        after = self.host.add_shape((0, 0, 5, 5))
        self.assertEqual(rect.elements(), [rect])

        rect.set_content_type(ContentType.TEXT_TYPE)
        frame = rect.elements()[0]
        self.assertIsInstance(frame, MemTextFrame)
        self.assertEqual(frame.geometric_bounds, (0, 0, 50, 60))
        self.assertEqual(self.host.page.items, [before, frame, after])

        # Converting again keeps the same frame.
        rect.set_content_type(ContentType.TEXT_TYPE)
        self.assertIs(rect.elements()[0], frame)

    def testRemovedShape(self):
        oval = self.host.add_shape((0, 0, 50, 60), 'oval')
        oval.remove()
        self.assertRaises(StaleReference, oval.set_content_type, ContentType.TEXT_TYPE)
        self.assertRaises(StaleReference, oval.add_text_path)
        self.assertEqual(self.host.page.items, [])

    def testBadContentType(self):
        rect = self.host.add_shape((0, 0, 50, 60))
        self.assertRaises(HostRejection, rect.set_content_type, 'text')

    def testKinds(self):
        self.assertEqual(self.host.add_shape((0, 0, 1, 1), 'oval').kind, TargetKind.SHAPE)
        self.assertEqual(self.host.add_shape((0, 0, 1, 1), 'polygon').kind, TargetKind.POLYGON)
        line = self.host.add_line((10, 40), (0, 20))
        self.assertEqual(line.kind, TargetKind.GRAPHIC_LINE)
        self.assertEqual(line.geometric_bounds, (20, 0, 40, 10))

    def testTextPaths(self):
        line = self.host.add_line((0, 0), (10, 0))
        path = line.add_text_path()
        path.set_contents('along')
        self.assertEqual(path.kind, TargetKind.TEXT_PATH)
        self.assertEqual(line.text_paths(), [path])
        self.assertEqual([t.contents for t in path.texts()], ['along'])
        line.remove()
        self.assertFalse(path.is_valid())
        self.assertEqual(line.text_paths(), [])

    def testFonts(self):
        self.assertTrue(self.host.find_font('Helvetica', 'Bold').installed)
        missing = self.host.find_font('Helvetica', 'Black')
        self.assertFalse(missing.installed)
        self.assertEqual(missing.full_name, 'Helvetica\tBlack')


if __name__ == "__main__":
    unittest.main()
