import pytest
import sys
from pathlib import Path

# Add src to sys.path so we can import qml_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from qml_toolkit.importer.config import ImportConfig
from qml_toolkit.importer.messages import MessageCatalog
from qml_toolkit.importer.question_types.common import ConversionContext, read_source_question
from qml_toolkit.importer.reader import read_document


# ─────────────────────────────────────────────────────────────────────────────
# Sample QUESTION elements, one per supported QTYPE
# ─────────────────────────────────────────────────────────────────────────────

MC_QUESTION = """
<QUESTION ID="1001" DESCRIPTION="Capital of France" TOPIC="Geography">
  <CONTENT TYPE="text/html"><![CDATA[<p>What is the capital of France?</p>]]></CONTENT>
  <ANSWER QTYPE="MC" SHUFFLE="N">
    <CHOICE ID="0"><CONTENT TYPE="text/plain">Paris</CONTENT></CHOICE>
    <CHOICE ID="1"><CONTENT TYPE="text/plain">Berlin</CONTENT></CHOICE>
    <CHOICE ID="2"><CONTENT TYPE="text/plain">Rome</CONTENT></CHOICE>
  </ANSWER>
  <OUTCOME ID="0 Paris" SCORE="1"><CONDITION>"0"</CONDITION><CONTENT TYPE="text/plain">Well done</CONTENT></OUTCOME>
  <OUTCOME ID="1 Berlin" SCORE="0"><CONDITION>"1"</CONDITION><CONTENT TYPE="text/plain">Berlin is in Germany</CONTENT></OUTCOME>
  <OUTCOME ID="2 Rome" SCORE="0"><CONDITION>"2"</CONDITION><CONTENT TYPE="text/plain">Rome is in Italy</CONTENT></OUTCOME>
</QUESTION>
"""

MR_QUESTION = """
<QUESTION ID="1002" DESCRIPTION="Prime numbers" TOPIC="Maths">
  <CONTENT TYPE="text/plain">Select the primes</CONTENT>
  <ANSWER QTYPE="MR" SHUFFLE="Y">
    <CHOICE ID="0"><CONTENT>2</CONTENT></CHOICE>
    <CHOICE ID="1"><CONTENT>3</CONTENT></CHOICE>
    <CHOICE ID="2"><CONTENT>4</CONTENT></CHOICE>
    <CHOICE ID="3"><CONTENT>5</CONTENT></CHOICE>
  </ANSWER>
  <OUTCOME ID="right" SCORE="1"><CONDITION>"0" AND "1" AND NOT "2" AND "3"</CONDITION><CONTENT>Correct!</CONTENT></OUTCOME>
  <OUTCOME ID="wrong" SCORE="0"><CONDITION>OTHER</CONDITION><CONTENT>Not quite</CONTENT></OUTCOME>
</QUESTION>
"""

TF_QUESTION = """
<QUESTION ID="1003" DESCRIPTION="Sky colour" TOPIC="Maths">
  <CONTENT TYPE="text/plain">The sky is blue.</CONTENT>
  <ANSWER QTYPE="TF">
    <CHOICE ID="0"><CONTENT>True</CONTENT></CHOICE>
    <CHOICE ID="1"><CONTENT>False</CONTENT></CHOICE>
  </ANSWER>
  <OUTCOME ID="0 True" SCORE="1"><CONDITION>"0"</CONDITION><CONTENT>Yes it is</CONTENT></OUTCOME>
  <OUTCOME ID="1 False" SCORE="0"><CONDITION>"1"</CONDITION><CONTENT>Look up</CONTENT></OUTCOME>
</QUESTION>
"""

FIB_QUESTION = """
<QUESTION ID="1004" DESCRIPTION="Fill in Blanks question" TOPIC="Chemistry">
  <ANSWER QTYPE="FIB">
    <CONTENT TYPE="text/plain">Loss of oxygen is called</CONTENT>
    <CHOICE ID="0"><CONTENT TYPE="text/plain"></CONTENT></CHOICE>
  </ANSWER>
  <OUTCOME ID="right" SCORE="1"><CONDITION>"0" MATCHES NOCASE "reduction" OR "0" NEAR NOCASE "reduktion"</CONDITION><CONTENT TYPE="text/plain">Correct</CONTENT></OUTCOME>
  <OUTCOME ID="wrong" SCORE="0"><CONDITION>OTHER</CONDITION><CONTENT TYPE="text/plain">It is reduction</CONTENT></OUTCOME>
</QUESTION>
"""

FIB_PER_BLANK_QUESTION = """
<QUESTION ID="1005" DESCRIPTION="Capitals" TOPIC="Geography">
  <CONTENT TYPE="text/plain">Complete the sentence.</CONTENT>
  <ANSWER QTYPE="FIB">
    <CONTENT TYPE="text/plain">The capital of France is</CONTENT>
    <CHOICE ID="0"><CONTENT TYPE="text/plain"></CONTENT></CHOICE>
    <CONTENT TYPE="text/plain">and of Italy is</CONTENT>
    <CHOICE ID="1"><CONTENT TYPE="text/plain"></CONTENT></CHOICE>
  </ANSWER>
  <OUTCOME ID="0 Paris" SCORE="1"><CONDITION>"0" MATCHES NOCASE "Paris"</CONDITION><CONTENT>Yes</CONTENT></OUTCOME>
  <OUTCOME ID="1 Rome" SCORE="1"><CONDITION>"1" MATCHES "Rome"</CONDITION><CONTENT>Right</CONTENT></OUTCOME>
  <OUTCOME ID="wrong" SCORE="0"><CONDITION>OTHER</CONDITION><CONTENT>No</CONTENT></OUTCOME>
</QUESTION>
"""

NUM_RANGE_QUESTION = """
<QUESTION ID="1006" DESCRIPTION="Boiling point" TOPIC="Chemistry">
  <CONTENT TYPE="text/plain">Boiling point of water in Celsius?</CONTENT>
  <ANSWER QTYPE="NUM">
    <CHOICE ID="0"><CONTENT TYPE="text/plain"></CONTENT></CHOICE>
  </ANSWER>
  <OUTCOME ID="right" SCORE="2"><CONDITION>"0" &gt;= "99" AND "0" &lt;= "101"</CONDITION><CONTENT>Correct</CONTENT></OUTCOME>
  <OUTCOME ID="wrong" SCORE="0"><CONDITION>OTHER</CONDITION><CONTENT>It boils at 100</CONTENT></OUTCOME>
</QUESTION>
"""

ESSAY_QUESTION = """
<QUESTION ID="1007" DESCRIPTION="Describe photosynthesis" TOPIC="Biology">
  <CONTENT TYPE="text/html"><![CDATA[<p>Describe photosynthesis.</p>]]></CONTENT>
  <ANSWER QTYPE="ESSAY"/>
  <OUTCOME ID="0" SCORE="0"><CONDITION>"0"</CONDITION><CONTENT>Mention chlorophyll</CONTENT></OUTCOME>
</QUESTION>
"""

MATCH_QUESTION = """
<QUESTION ID="1008" DESCRIPTION="Match capitals" TOPIC="Geography">
  <CONTENT TYPE="text/plain">Match each country with its capital.</CONTENT>
  <ANSWER QTYPE="MATCH" SHUFFLE="Y">
    <CHOICE ID="0"><CONTENT>France</CONTENT><OPTION>Paris</OPTION><OPTION>Berlin</OPTION><OPTION>Madrid</OPTION></CHOICE>
    <CHOICE ID="1"><CONTENT>Germany</CONTENT><OPTION>Paris</OPTION><OPTION>Berlin</OPTION><OPTION>Madrid</OPTION></CHOICE>
  </ANSWER>
  <OUTCOME ID="right" SCORE="2"><CONDITION>"0" MATCHES "Paris" AND "1" MATCHES "Berlin"</CONDITION><CONTENT>All matched</CONTENT></OUTCOME>
  <OUTCOME ID="wrong" SCORE="0"><CONDITION>OTHER</CONDITION><CONTENT>Try again</CONTENT></OUTCOME>
</QUESTION>
"""

SEL_QUESTION = """
<QUESTION ID="1009" DESCRIPTION="Select capitals" TOPIC="Geography">
  <CONTENT TYPE="text/plain">Choose the capitals.</CONTENT>
  <ANSWER QTYPE="SEL">
    <CHOICE ID="0"><CONTENT>France: ___</CONTENT><OPTION>Paris</OPTION><OPTION>Berlin</OPTION></CHOICE>
  </ANSWER>
  <OUTCOME ID="right" SCORE="1"><CONDITION>"0" MATCHES "Paris"</CONDITION><CONTENT>Correct</CONTENT></OUTCOME>
  <OUTCOME ID="wrong" SCORE="0"><CONDITION>OTHER</CONDITION><CONTENT>Wrong</CONTENT></OUTCOME>
</QUESTION>
"""

UNKNOWN_QUESTION = """
<QUESTION ID="1010" DESCRIPTION="Hotspot" TOPIC="Geography">
  <CONTENT TYPE="text/plain">Click on Paris.</CONTENT>
  <ANSWER QTYPE="HOT"/>
  <OUTCOME ID="right" SCORE="1"><CONDITION>"0"</CONDITION><CONTENT>Yes</CONTENT></OUTCOME>
</QUESTION>
"""

BROKEN_CONDITION_QUESTION = """
<QUESTION ID="1011" DESCRIPTION="Broken" TOPIC="Geography">
  <CONTENT TYPE="text/plain">Broken condition.</CONTENT>
  <ANSWER QTYPE="MR">
    <CHOICE ID="0"><CONTENT>A</CONTENT></CHOICE>
    <CHOICE ID="1"><CONTENT>B</CONTENT></CHOICE>
  </ANSWER>
  <OUTCOME ID="right" SCORE="1"><CONDITION>"0" FOO "1"</CONDITION><CONTENT>Yes</CONTENT></OUTCOME>
</QUESTION>
"""


def wrap_qml(*questions: str) -> str:
    """Wrap QUESTION elements in a QML root."""
    return "<QML>" + "".join(questions) + "</QML>"


# Common test fixtures
@pytest.fixture
def config() -> ImportConfig:
    return ImportConfig()


@pytest.fixture
def ctx(config) -> ConversionContext:
    """Fresh conversion context with the English catalog."""
    return ConversionContext(config=config, messages=MessageCatalog("en"))


@pytest.fixture
def load_source(ctx):
    """Return a function reading one QUESTION element into a SourceQuestion."""
    def _load(question_xml: str, position: int = 1):
        document = read_document(wrap_qml(question_xml))
        return read_source_question(document.questions()[0], position, ctx)
    return _load


@pytest.fixture
def sample_document() -> str:
    """QML document with one question of every supported kind plus an unknown one."""
    return wrap_qml(
        MC_QUESTION,
        MR_QUESTION,
        TF_QUESTION,
        FIB_QUESTION,
        FIB_PER_BLANK_QUESTION,
        NUM_RANGE_QUESTION,
        ESSAY_QUESTION,
        MATCH_QUESTION,
        SEL_QUESTION,
        UNKNOWN_QUESTION,
    )


@pytest.fixture
def sample_path(tmp_path: Path, sample_document: str) -> Path:
    path = tmp_path / "sample.qml"
    path.write_text(sample_document, encoding="utf-8")
    return path
