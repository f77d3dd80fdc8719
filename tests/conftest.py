"""Shared pytest fixtures for archbase-cli tests."""

from pathlib import Path

import pytest

USER_FORM_TSX = """\
import React, { useState, useEffect } from 'react';
import { ArchbaseEdit, ArchbaseFormTemplate, ArchbaseRemoteDataSource } from '@archbase/react';
import * as yup from 'yup';

interface UserFormProps {
  dataSource: ArchbaseRemoteDataSource<UserDto, string>;
  title?: string;
}

export function UserForm({ dataSource, title }: UserFormProps) {
  const [saving, setSaving] = useState(false);
  useEffect(() => {}, []);
  const schema = yup.object({ name: yup.string().required() });
  dataSource.appendToFieldArray('roles', {});
  return (
    <ArchbaseFormTemplate dataSource={dataSource} title="Users">
      <ArchbaseEdit dataSource={dataSource} dataField="name" label="Name" />
      <ArchbaseEdit dataField="email" />
    </ArchbaseFormTemplate>
  );
}
"""

USER_CONTROLLER_JAVA = """\
package com.example.users;

@RestController
@RequestMapping("/api/users")
public class UserController {

    private final UserService service;

    public UserController(UserService service) {
        this.service = service;
    }

    @GetMapping("/{id}")
    public ResponseEntity<UserDto> getUser(@PathVariable String id) {
        return ResponseEntity.ok(service.find(id));
    }

    @GetMapping
    public List<UserDto> listUsers(@RequestParam(required = false) String name,
                                   @RequestParam Integer page) {
        return service.list(name, page);
    }

    @PostMapping("/import")
    public ResponseEntity<Void> importUsers(@RequestBody List<UserDto> users) {
        return ResponseEntity.ok().build();
    }
}
"""

CUSTOMER_JAVA = """\
package com.example.domain;

public class CustomerDto implements Serializable {

    private static final long serialVersionUID = 1L;

    @NotNull
    @Email
    private String email;

    private String nome;

    private Integer age;

    private List<AddressDto> addresses;

    private LocalDateTime createdAt;

    public enum Status {
        ACTIVE, INACTIVE;
    }
}
"""

CUSTOMER_DTO_TS = """\
export class CustomerDto {
  id: string;
  code?: string;
  version?: number;
  @IsNotEmpty({
    message: "mentors:nome customer must be provided",
  })
  nome: string;
  email?: string;
  age?: number;
  active?: boolean;
  status?: Status;
  tags?: string[];
  birthDate?: Date;
  isNovoCustomer: boolean;
}
"""


@pytest.fixture
def user_form_source():
    return USER_FORM_TSX


@pytest.fixture
def controller_source():
    return USER_CONTROLLER_JAVA


@pytest.fixture
def customer_java():
    return CUSTOMER_JAVA


@pytest.fixture
def customer_dto(tmp_path: Path) -> Path:
    path = tmp_path / "CustomerDto.ts"
    path.write_text(CUSTOMER_DTO_TS, encoding="utf-8")
    return path


@pytest.fixture
def react_project(tmp_path: Path) -> Path:
    """A small Archbase project with one form, one list and ignored folders."""
    root = tmp_path / "app"
    (root / "src" / "forms").mkdir(parents=True)
    (root / "src" / "pages").mkdir(parents=True)
    (root / "node_modules" / "lib").mkdir(parents=True)

    (root / "src" / "forms" / "UserForm.tsx").write_text(USER_FORM_TSX, encoding="utf-8")
    (root / "src" / "pages" / "UserList.tsx").write_text(
        """\
import React from 'react';
import { ArchbaseDataGrid, ArchbaseButton } from '@archbase/react';

export const UserList = () => {
  return (
    <div>
      <ArchbaseDataGrid pageSize={25} striped={true} />
      <ArchbaseButton label="New" />
    </div>
  );
};
""",
        encoding="utf-8",
    )
    (root / "src" / "utils.ts").write_text("export const sum = (a: number, b: number) => a + b;\n", encoding="utf-8")
    (root / "node_modules" / "lib" / "Hidden.tsx").write_text(
        "import { ArchbaseEdit } from '@archbase/react';\nexport const Hidden = () => <ArchbaseEdit />;\n",
        encoding="utf-8",
    )
    (root / "package.json").write_text(
        '{"dependencies": {"react": "^18.2.0", "@archbase/react": "2.1.0", "@mantine/core": "7.0.0"}}',
        encoding="utf-8",
    )
    return root
