from deldup.core.models import HashAlgorithmName

ALGORITHM_ALIASES = {
    "xxh128": HashAlgorithmName.XXH128,
    "xxhash": HashAlgorithmName.XXH128,
    "md5": HashAlgorithmName.MD5,
}

ALGORITHM_CHOICES = list(ALGORITHM_ALIASES.keys())

ALGORITHM_HELP_TEXT = (
    "Checksum used to prove two same-size files identical:\n"
    "  xxh128 (xxhash) : 128-bit xxHash, fast (default)\n"
    "  md5             : MD5 digest\n"
)

PROMPT_TEXT = "Delete {path}? [y]es / [n]o / [a]ll yes / [s]kip all / [q]uit: "

EPILOG_TEXT = """
Files in UNKNOWN that are identical to a file in TRUSTED (or to an earlier
file in UNKNOWN) are deleted. Nothing in TRUSTED is ever modified.
Deletion is permanent: files are not moved to a trash folder.

Examples:
  Ask before deleting each camera photo already present in the archive
  %(prog)s ~/Pictures/archive ~/Pictures/camera-import

  Only report what would be deleted
  %(prog)s --simulate --force ~/Pictures/archive ~/Pictures/camera-import

  Remove repeated files inside one folder, top level only
  %(prog)s --no-subfolders ~/Downloads

  Delete without asking, including hidden and read-only duplicates (for scripts)
  %(prog)s --force --hidden --delete-hidden --delete-readonly /srv/backup /srv/incoming > report.txt

Exit status:
  0-254  number of files deleted
  255    255 or more files deleted, OR a usage error (the two share this
         status; read the report to tell them apart)
  1      one file deleted, or the run itself failed
  130    interrupted with Ctrl+C
"""
