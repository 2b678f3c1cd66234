from typing import Iterable, List

# Shell interpreters, file and transfer tools, remote access, process/system
# control, then user and group management.
DEFAULT_DANGEROUS_COMMANDS = [
    "cmd",
    "powershell",
    "bash",
    "sh",
    "curl",
    "wget",
    "rm",
    "del",
    "mv",
    "scp",
    "ftp",
    "tftp",
    "ssh",
    "netcat",
    "nc",
    "telnet",
    "ping",
    "kill",
    "pkill",
    "killall",
    "reboot",
    "shutdown",
    "halt",
    "init",
    "systemctl",
    "service",
    "chown",
    "chmod",
    "chgrp",
    "useradd",
    "usermod",
    "userdel",
    "groupadd",
    "groupmod",
    "groupdel",
    "passwd",
    "su",
    "sudo",
    "visudo",
    "adduser",
]


class CommandRegistry:
    """
    A registry for the command names that make an exec() call suspicious.

    Entries are kept unique in order of first appearance. Matching is a raw substring
    test, so "nc" also matches inside "once". This is a known source of false positives.
    """

    def __init__(self, commands: Iterable[str] = None):
        self.commands: List[str] = []
        for command in commands if commands is not None else DEFAULT_DANGEROUS_COMMANDS:
            self.add_command(command)

    def add_command(self, command: str):
        if not isinstance(command, str):
            raise TypeError("Command must be a string.")
        if not command:
            raise ValueError("Command must not be empty.")
        if command not in self.commands:
            self.commands.append(command)

    def get_commands(self) -> List[str]:
        return self.commands

    def matches(self, argument: str) -> bool:
        return any(command in argument for command in self.commands)
