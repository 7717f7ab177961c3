"""
Switch notation behavioral tests ("/name:value", "/name", "/-name").

Scope
- Positional binding of required values and left-to-right overwrite of optional defaults.
- Input checks: required count, switch shape, duplicated and unknown switches.
- Usage rendering: single action, named subcommand, general multi-action usage.

Conventions
- Test method names follow CamelCase per project convention.
- Output is captured with a BufferMessenger; runs never exit the process (shell=False).
"""
import datetime
import unittest
from typing import Annotated
from unittest import TestCase

from argosy import action, run, Required, Optional, BufferMessenger, ExitCode


class ManyParametersProgram:
    received = []

    @action
    @staticmethod
    def RunProgram(
            sParameter: str,
            iParameter: int,
            bParameter: Annotated[bool, Required()],
            osParameter: Annotated[str, Optional("0", "os")],
            oiParameter: Annotated[int, Optional(0, "oi")],
            obParameter: Annotated[bool, Optional(False, "ob")],
    ):
        ManyParametersProgram.received.append(
            (sParameter, iParameter, bParameter, osParameter, oiParameter, obParameter)
        )


class OneActionProgramWithOptionalParameters:
    received = []

    @action
    @staticmethod
    def Test(
            parameter1: Annotated[str, Optional("value1", descr="param1 desc")],
            param2: Annotated[int, Optional(42, descr="desc2")],
    ):
        OneActionProgramWithOptionalParameters.received.append((parameter1, param2))


class TwoActionsProgram:
    received = []

    @action("test1 description")
    @staticmethod
    def Test1(parameter: str):
        TwoActionsProgram.received.append(("test1", parameter))

    @action
    @staticmethod
    def Test2(parameter: str):
        TwoActionsProgram.received.append(("test2", parameter))


class TypedProgram:
    received = []

    @action("Typed values")
    @staticmethod
    def Typed(
            numbers: list[int],
            when: Annotated[datetime.date, Optional("01-01-2000", "w", descr="When")],
            names: Annotated[list[str], Optional(["a"], "n")],
            limit: Annotated[int | None, Optional(None, "l")],
    ):
        TypedProgram.received.append((numbers, when, names, limit))


class SwitchTestCase(TestCase):
    def setUp(self):
        for host in (ManyParametersProgram, OneActionProgramWithOptionalParameters, TwoActionsProgram, TypedProgram):
            host.received.clear()
        self.messenger = BufferMessenger()

    def run_host(self, host, *tokens):
        return run(host, tokens, self.messenger, shell=False)


class TestBinding(SwitchTestCase):
    def testAllParametersSet(self):
        status = self.run_host(ManyParametersProgram, "string", "1", "true", "/os:string", "/oi:1", "/ob")
        self.assertEqual(status, ExitCode.SUCCESS)
        self.assertEqual(ManyParametersProgram.received, [("string", 1, True, "string", 1, True)])
        self.assertEqual(self.messenger.lines, ())

    def testOptionalDefaults(self):
        self.run_host(ManyParametersProgram, "string", "1", "true")
        self.assertEqual(ManyParametersProgram.received, [("string", 1, True, "0", 0, False)])

    def testNegativeBoolean(self):
        self.run_host(ManyParametersProgram, "string", "1", "true", "/-ob")
        self.assertEqual(ManyParametersProgram.received[-1][5], False)

    def testPrimaryNameResolvesAlongsideAltNames(self):
        self.run_host(ManyParametersProgram, "string", "1", "true", "/OSPARAMETER:abc", "/oiParameter:7")
        self.assertEqual(ManyParametersProgram.received[-1][3:5], ("abc", 7))

    def testValueKeepsEverythingAfterSeparator(self):
        self.run_host(ManyParametersProgram, "string", "1", "true", "/os:a:b")
        self.assertEqual(ManyParametersProgram.received[-1][3], "a:b")

    def testEmptyValueBindsZero(self):
        self.run_host(ManyParametersProgram, "string", "1", "true", "/oi:")
        self.assertEqual(ManyParametersProgram.received[-1][4], 0)

    def testSingleActionAllOptionalRunsWithoutTokens(self):
        status = self.run_host(OneActionProgramWithOptionalParameters)
        self.assertEqual(status, ExitCode.SUCCESS)
        self.assertEqual(OneActionProgramWithOptionalParameters.received, [("value1", 42)])

    def testTypedValues(self):
        self.run_host(TypedProgram, "1+2", "/w:02-03-2004", "/n:x+y", "/l:5")
        self.assertEqual(TypedProgram.received, [([1, 2], datetime.date(2004, 3, 2), ["x", "y"], 5)])

    def testTypedDefaults(self):
        self.run_host(TypedProgram, "3")
        self.assertEqual(TypedProgram.received, [([3], datetime.date(2000, 1, 1), ["a"], None)])

    def testMultiActionSkipsActionToken(self):
        self.run_host(TwoActionsProgram, "TEST2", "value")
        self.assertEqual(TwoActionsProgram.received, [("test2", "value")])


class TestInputErrors(SwitchTestCase):
    def testNotAllRequiredParametersSet(self):
        status = self.run_host(ManyParametersProgram, "test")
        self.assertEqual(status, ExitCode.GENERIC_ERROR)
        self.assertEqual(ManyParametersProgram.received, [])
        self.assertEqual(self.messenger.lines, (
            "usage: manyparametersprogram sParameter iParameter bParameter [/os:value] [/oi:number] [/ob]",
            "    [/os:value]",
            "        default value: '0'",
            "    [/oi:number]",
            "        default value: 0",
            "    [/ob]",
            "        default value: False",
            "Error: Not all required parameters are set",
        ))

    def testNotAllRequiredParametersSetForSubcommand(self):
        status = self.run_host(TwoActionsProgram, "test1")
        self.assertEqual(status, ExitCode.GENERIC_ERROR)
        self.assertEqual(TwoActionsProgram.received, [])
        self.assertEqual(self.messenger.lines, (
            "test1 description",
            "usage: twoactionsprogram test1 parameter",
            "Error: Not all required parameters are set",
        ))

    def testSwitchWithoutMarker(self):
        self.run_host(ManyParametersProgram, "string", "1", "true", "os:string")
        self.assertEqual(self.messenger.lines, ("Unknown parameter os:string",))

    def testDuplicatedSwitch(self):
        self.run_host(ManyParametersProgram, "string", "1", "true", "/os:a", "/OS:b")
        self.assertEqual(self.messenger.lines, ("Parameter with name os passed two times",))

    def testUnknownSwitchIsReportedVerbatim(self):
        status = self.run_host(ManyParametersProgram, "string", "1", "true", "/Unknown:1")
        self.assertEqual(status, ExitCode.GENERIC_ERROR)
        self.assertEqual(self.messenger.lines, ("Unknown parameter name /Unknown:1",))

    def testConversionFailure(self):
        self.run_host(ManyParametersProgram, "string", "one", "true")
        self.assertEqual(self.messenger.lines, ('Could not convert "one" to int',))
        self.assertEqual(ManyParametersProgram.received, [])

    def testUnknownAction(self):
        status = self.run_host(TwoActionsProgram, "test3", "value")
        self.assertEqual(status, ExitCode.GENERIC_ERROR)
        self.assertEqual(self.messenger.lines[0], "usage: twoactionsprogram <subcommand> [args]")
        self.assertEqual(self.messenger.lines[-1], 'Unknown subcommand "test3"')


class TestUsage(SwitchTestCase):
    def testHelpForSingleAction(self):
        for token in ("/?", "/help", "/h", "help"):
            with self.subTest(token=token):
                self.messenger.clear()
                status = self.run_host(OneActionProgramWithOptionalParameters, token)
                self.assertEqual(status, ExitCode.SUCCESS)
                self.assertEqual(self.messenger.lines, (
                    "usage: oneactionprogramwithoptionalparameters [/parameter1:value] [/param2:number]",
                    "    [/parameter1:value]  param1 desc",
                    "        default value: 'value1'",
                    "    [/param2:number]     desc2",
                    "        default value: 42",
                ))
        self.assertEqual(OneActionProgramWithOptionalParameters.received, [])

    def testHelpForSubcommand(self):
        self.run_host(TwoActionsProgram, "help", "Test2")
        self.assertEqual(self.messenger.lines, ("usage: twoactionsprogram test2 parameter",))

    def testHelpForSubcommandWithDescription(self):
        self.run_host(TwoActionsProgram, "help", "test1")
        self.assertEqual(self.messenger.lines, (
            "test1 description",
            "usage: twoactionsprogram test1 parameter",
        ))

    def testGeneralUsage(self):
        for tokens in ((), ("help",)):
            with self.subTest(tokens=tokens):
                self.messenger.clear()
                status = self.run_host(TwoActionsProgram, *tokens)
                self.assertEqual(status, ExitCode.SUCCESS)
                self.assertEqual(self.messenger.lines, (
                    "usage: twoactionsprogram <subcommand> [args]",
                    "Type 'twoactionsprogram help <subcommand>' for help on a specific subcommand.",
                    "",
                    "Available subcommands:",
                    "test1 test1 description",
                    "test2 ",
                ))
        self.assertEqual(TwoActionsProgram.received, [])

    def testHelpForUnknownSubcommand(self):
        status = self.run_host(TwoActionsProgram, "help", "test3")
        self.assertEqual(status, ExitCode.GENERIC_ERROR)
        self.assertEqual(self.messenger.lines[-1], 'Unknown subcommand "test3"')
        self.assertEqual(self.messenger.lines[3], "Available subcommands:")

    def testEmptyTokensShowUsageWhenRequiredExist(self):
        status = self.run_host(ManyParametersProgram)
        self.assertEqual(status, ExitCode.SUCCESS)
        self.assertEqual(ManyParametersProgram.received, [])
        self.assertTrue(self.messenger.lines[0].startswith("usage: manyparametersprogram sParameter"))

    def testTypedUsage(self):
        self.run_host(TypedProgram, "/?")
        self.assertEqual(self.messenger.lines, (
            "Typed values",
            "usage: typedprogram numbers [/w:dd-mm-yyyy] [/n:value[+value]] [/l:number]",
            "    [/w:dd-mm-yyyy]     When",
            "        default value: '01-01-2000'",
            "    [/n:value[+value]]",
            "        default value: a",
        ))


if __name__ == '__main__':
    unittest.main()
