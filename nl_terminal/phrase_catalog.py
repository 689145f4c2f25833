"""Phrase catalog mapping natural-language requests to shell commands.

Order matters: the translator and the suggestion list walk the table from
top to bottom, so earlier phrases win ties.
"""

from types import MappingProxyType
from typing import Mapping

from .models import PhraseEntry

_PHRASES = (
    # File operations
    ("list files", "ls -la",
     "Lists all files and directories in the current location, including hidden files, "
     "with detailed information like permissions, owner, size, and modification date."),
    ("list all files", "ls -la",
     "Displays a detailed listing of all files including hidden ones (those starting with .)."),
    ("show files", "ls -la",
     "Shows all files in the current directory with full details."),
    ("create folder", "mkdir new_folder",
     'Creates a new directory called "new_folder" in the current location.'),
    ("make directory", "mkdir new_directory",
     'Creates a new directory. Replace "new_directory" with your desired folder name.'),
    ("delete file", "rm filename",
     'Removes the specified file. Replace "filename" with the actual file name. Use with caution!'),
    ("copy file", "cp source destination",
     "Copies a file from source to destination. Replace with actual paths."),
    ("move file", "mv source destination",
     "Moves or renames a file from source to destination."),
    ("find files", 'find . -name "*.txt"',
     "Searches for all .txt files in the current directory and subdirectories."),

    # System info
    ("show disk space", "df -h",
     "Displays disk space usage in human-readable format (GB, MB, etc.)."),
    ("check disk usage", "du -sh *",
     "Shows the size of each file and folder in the current directory."),
    ("show memory", "free -h",
     "Displays RAM usage including total, used, and available memory."),
    ("system info", "uname -a",
     "Shows detailed system information including kernel version and architecture."),
    ("current directory", "pwd",
     "Prints the full path of the current working directory."),
    ("where am i", "pwd",
     "Shows your current location in the file system."),

    # Process management
    ("running processes", "ps aux",
     "Lists all running processes with detailed information."),
    ("show processes", "ps aux | head -20",
     "Displays the top 20 running processes."),
    ("find process", "ps aux | grep process_name",
     "Searches for a specific process. Replace \"process_name\" with what you're looking for."),

    # Network
    ("check internet", "ping -c 4 google.com",
     "Tests internet connectivity by sending 4 ping requests to Google."),
    ("show ip", "ip addr show",
     "Displays all network interfaces and their IP addresses."),
    ("network connections", "netstat -tuln",
     "Shows all active network connections and listening ports."),
    ("download file", "curl -O url",
     "Downloads a file from the specified URL."),

    # Git
    ("git status", "git status",
     "Shows the current state of your git repository including modified and staged files."),
    ("git history", "git log --oneline -10",
     "Displays the last 10 commits in a compact format."),
    ("create branch", "git checkout -b branch_name",
     "Creates a new git branch and switches to it."),

    # Text operations
    ("search in files", 'grep -r "search_term" .',
     "Searches for text in all files recursively in the current directory."),
    ("count lines", "wc -l filename",
     "Counts the number of lines in a file."),
    ("view file", "cat filename",
     "Displays the contents of a file."),
    ("edit file", "nano filename",
     "Opens the file in the nano text editor."),

    # Date/Time
    ("current time", "date",
     "Displays the current date and time."),
    ("calendar", "cal",
     "Shows a calendar for the current month."),

    # User info
    ("who am i", "whoami",
     "Displays the current logged-in username."),
    ("current user", "whoami",
     "Shows which user account you are using."),

    # Clear
    ("clear screen", "clear",
     "Clears the terminal screen."),
    ("clear", "clear",
     "Clears the terminal display."),
)

PHRASE_CATALOG: Mapping[str, PhraseEntry] = MappingProxyType({
    key: PhraseEntry(phrase_key=key, shell_command=command, explanation=explanation)
    for key, command, explanation in _PHRASES
})
