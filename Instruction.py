from dataclasses import dataclass

STAGES = ("IF", "ID", "EX", "MEM", "WB")


class MalformedInstruction(ValueError):
    """Unrecognised mnemonic or wrong operand shape for one instruction line."""


class InputError(Exception):
    """Program input that cannot be simulated at all."""


class InputTruncated(InputError):
    """Fewer instruction lines than the declared count."""


class Opcode:
    LOAD = "LOAD"
    STORE = "STORE"
    ADD = "ADD"
    SUB = "SUB"

    ALL = (LOAD, STORE, ADD, SUB)
    MEMORY = (LOAD, STORE)
    ALU = (ADD, SUB)


@dataclass(frozen=True)
class Register:
    name: str

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class Immediate:
    token: str

    def __str__(self):
        return self.token


class Instruction:
    def __init__(self, opcode, destination=None, source1=None, source2=None,
                 memory_location=None, text=None):
        self.opcode = opcode
        self.destination = destination
        self.source1 = source1
        self.source2 = source2
        self.memory_location = memory_location
        self.text = text

        # Stage cycles, written once by the scheduler.
        self.IF = None
        self.ID = None
        self.EX = None
        self.MEM = None
        self.WB = None
        self.stalled = False

    @property
    def is_memory_op(self):
        return self.opcode in Opcode.MEMORY

    @property
    def is_alu_op(self):
        return self.opcode in Opcode.ALU

    def reads(self):
        """Return the registers this instruction reads, immediates excluded."""
        return [op for op in (self.source1, self.source2) if isinstance(op, Register)]

    def writeback_offset(self):
        """Cycles from MEM to WB; a loaded value needs one more cycle."""
        return 2 if self.opcode == Opcode.LOAD else 1

    def stage_cycles(self):
        return {stage: getattr(self, stage) for stage in STAGES}

    def operands(self):
        if self.opcode == Opcode.LOAD:
            return [self.destination, self.memory_location]
        if self.opcode == Opcode.STORE:
            return [self.source1, self.memory_location]
        return [self.destination, self.source1, self.source2]

    def __str__(self):
        operands = ", ".join(str(op) for op in self.operands())
        return self.text or f"{self.opcode} {operands}"

    def __repr__(self):
        return f"Instruction({str(self)!r})"

    def to_dict(self):
        data = {
            "text": str(self),
            "opcode": self.opcode,
            "destination": str(self.destination) if self.destination else None,
            "sources": [str(op) for op in (self.source1, self.source2) if op is not None],
            "memory_location": self.memory_location,
            "stalled": self.stalled,
        }
        data.update(self.stage_cycles())
        return data
